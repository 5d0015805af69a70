"""Vehicle catalog schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from sharenest.schemas.base import APIModel


class VehicleBase(APIModel):
    title: str = Field(min_length=1, max_length=255)
    brand: str = Field(min_length=1, max_length=120)
    model: str = Field(min_length=1, max_length=120)
    year: int = Field(ge=1900, le=2100)
    seats: int = Field(ge=1, le=99)
    powertrain: str = "ICE"
    range_km: int | None = Field(default=None, ge=0)
    daily_rate: int = Field(ge=0)
    hourly_rate: int = Field(ge=0)
    per_km_rate: int = Field(default=0, ge=0)
    deposit_amount: int = Field(default=0, ge=0)
    pickup_points: list[str] = Field(default_factory=list)
    rules: list[str] = Field(default_factory=list)
    photos: list[str] = Field(default_factory=list)


class VehicleCreate(VehicleBase):
    """Payload for adding a vehicle to the catalog."""

    id: str | None = Field(default=None, min_length=1, max_length=64)
    owner_id: uuid.UUID | None = None


class VehicleUpdate(APIModel):
    """Partial update; any rate change starts a new rate version."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    powertrain: str | None = None
    range_km: int | None = Field(default=None, ge=0)
    daily_rate: int | None = Field(default=None, ge=0)
    hourly_rate: int | None = Field(default=None, ge=0)
    per_km_rate: int | None = Field(default=None, ge=0)
    deposit_amount: int | None = Field(default=None, ge=0)
    pickup_points: list[str] | None = None
    rules: list[str] | None = None
    photos: list[str] | None = None
    is_active: bool | None = None


class VehicleRead(VehicleBase):
    id: str
    owner_id: uuid.UUID | None = None
    rate_version: int
    is_active: bool
    created_at: datetime
