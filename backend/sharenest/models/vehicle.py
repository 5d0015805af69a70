"""Vehicle catalog model carrying the per-vehicle rate card."""
from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from sharenest.db.base import Base
from sharenest.models.mixins import JSONB_TYPE, TimestampMixin

RATE_FIELDS = ("daily_rate", "hourly_rate", "per_km_rate", "deposit_amount")


def _new_vehicle_id() -> str:
    return uuid.uuid4().hex


class Vehicle(TimestampMixin, Base):
    """A rentable vehicle; rates are integer yen."""

    __tablename__ = "vehicles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_vehicle_id)
    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    brand: Mapped[str] = mapped_column(String(120), nullable=False)
    model: Mapped[str] = mapped_column(String(120), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    seats: Mapped[int] = mapped_column(Integer, nullable=False)
    powertrain: Mapped[str] = mapped_column(String(64), nullable=False, default="ICE")
    range_km: Mapped[int | None] = mapped_column(Integer)

    daily_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    hourly_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    per_km_rate: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    deposit_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rate_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    pickup_points: Mapped[list[str]] = mapped_column(
        JSONB_TYPE, nullable=False, default=list
    )
    rules: Mapped[list[str]] = mapped_column(JSONB_TYPE, nullable=False, default=list)
    photos: Mapped[list[str]] = mapped_column(JSONB_TYPE, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def rates(self) -> dict[str, Any]:
        return {field: getattr(self, field) for field in RATE_FIELDS}
