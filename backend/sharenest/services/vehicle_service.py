"""Vehicle catalog data access helpers."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.core.errors import InvalidInput, VehicleNotFound
from sharenest.models import RATE_FIELDS, Vehicle
from sharenest.schemas.vehicle import VehicleCreate, VehicleUpdate

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = frozenset({"range_km"})


async def get_vehicle(session: AsyncSession, vehicle_id: str) -> Vehicle | None:
    """Return a vehicle by ID."""
    result = await session.execute(select(Vehicle).where(Vehicle.id == vehicle_id))
    return result.scalar_one_or_none()


async def require_vehicle(
    session: AsyncSession, vehicle_id: str, *, include_inactive: bool = False
) -> Vehicle:
    """Return a bookable vehicle or raise ``VehicleNotFound``."""
    vehicle = await get_vehicle(session, vehicle_id)
    if vehicle is None or (not vehicle.is_active and not include_inactive):
        raise VehicleNotFound(f"Vehicle {vehicle_id} not found")
    return vehicle


async def list_vehicles(
    session: AsyncSession,
    *,
    include_inactive: bool = False,
    skip: int = 0,
    limit: int = 50,
) -> list[Vehicle]:
    """Return catalog vehicles, newest first."""
    stmt = select(Vehicle)
    if not include_inactive:
        stmt = stmt.where(Vehicle.is_active.is_(True))
    stmt = stmt.order_by(Vehicle.created_at.desc(), Vehicle.id).offset(skip).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_vehicle(session: AsyncSession, payload: VehicleCreate) -> Vehicle:
    """Persist a new catalog vehicle."""
    data = payload.model_dump(exclude_none=True)
    vehicle = Vehicle(**data)
    session.add(vehicle)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise InvalidInput("Vehicle id already exists") from exc
    await session.refresh(vehicle)
    logger.info("Vehicle %s added to catalog", vehicle.id)
    return vehicle


async def update_vehicle(
    session: AsyncSession, vehicle: Vehicle, payload: VehicleUpdate
) -> Vehicle:
    """Apply a partial update, bumping ``rate_version`` when any rate changes."""
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_FIELDS
    }
    rates_changed = any(
        field in changes and changes[field] != getattr(vehicle, field)
        for field in RATE_FIELDS
    )
    for field, value in changes.items():
        setattr(vehicle, field, value)
    if rates_changed:
        vehicle.rate_version += 1
        logger.info(
            "Vehicle %s rate card changed; now version %s",
            vehicle.id,
            vehicle.rate_version,
        )
    await session.commit()
    await session.refresh(vehicle)
    return vehicle


async def list_owned_vehicle_ids(session: AsyncSession, owner_id: uuid.UUID) -> list[str]:
    result = await session.execute(select(Vehicle.id).where(Vehicle.owner_id == owner_id))
    return list(result.scalars().all())
