"""Vehicle catalog endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.api import deps
from sharenest.api.errors import to_http_exception
from sharenest.core.errors import SharenestError
from sharenest.models.user import UserRole
from sharenest.schemas.vehicle import VehicleCreate, VehicleRead, VehicleUpdate
from sharenest.services import vehicle_service
from sharenest.services.identity_service import CallerIdentity, has_role

router = APIRouter()

_require_admin = deps.require_role(UserRole.ADMIN)


@router.get("", response_model=list[VehicleRead], summary="List vehicles")
async def list_vehicles(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    caller: Annotated[CallerIdentity | None, Depends(deps.get_optional_caller)],
    include_inactive: bool = False,
    skip: int = 0,
    limit: int = 50,
) -> list[VehicleRead]:
    """Return the bookable catalog; admins may include retired vehicles."""
    vehicles = await vehicle_service.list_vehicles(
        session,
        include_inactive=include_inactive and has_role(caller, UserRole.ADMIN),
        skip=skip,
        limit=min(limit, 100),
    )
    return [VehicleRead.model_validate(obj) for obj in vehicles]


@router.get("/{vehicle_id}", response_model=VehicleRead, summary="Get vehicle")
async def get_vehicle(
    vehicle_id: str,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> VehicleRead:
    try:
        vehicle = await vehicle_service.require_vehicle(session, vehicle_id)
    except SharenestError as exc:
        raise to_http_exception(exc) from exc
    return VehicleRead.model_validate(vehicle)


@router.post(
    "",
    response_model=VehicleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add vehicle",
)
async def create_vehicle(
    payload: VehicleCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[CallerIdentity, Depends(_require_admin)],
) -> VehicleRead:
    try:
        vehicle = await vehicle_service.create_vehicle(session, payload)
    except SharenestError as exc:
        raise to_http_exception(exc) from exc
    return VehicleRead.model_validate(vehicle)


@router.patch("/{vehicle_id}", response_model=VehicleRead, summary="Update vehicle")
async def update_vehicle(
    vehicle_id: str,
    payload: VehicleUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[CallerIdentity, Depends(_require_admin)],
) -> VehicleRead:
    """Apply a partial update; rate changes start a new rate version."""
    try:
        vehicle = await vehicle_service.require_vehicle(
            session, vehicle_id, include_inactive=True
        )
        vehicle = await vehicle_service.update_vehicle(session, vehicle, payload)
    except SharenestError as exc:
        raise to_http_exception(exc) from exc
    return VehicleRead.model_validate(vehicle)
