"""Administrative endpoints for driver license review."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.api import deps
from sharenest.models.user import LicenseStatus, UserRole
from sharenest.schemas.user import LicenseRead, LicenseReviewRequest
from sharenest.services import user_service
from sharenest.services.identity_service import CallerIdentity

router = APIRouter()

_require_admin = deps.require_role(UserRole.ADMIN)


@router.get("/licenses", response_model=list[LicenseRead], summary="List license reviews")
async def list_licenses(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[CallerIdentity, Depends(_require_admin)],
    license_status: LicenseStatus | None = None,
) -> list[LicenseRead]:
    users = await user_service.list_license_reviews(session, status=license_status)
    return [LicenseRead.model_validate(obj) for obj in users]


@router.post(
    "/licenses/{user_id}/review",
    response_model=LicenseRead,
    summary="Approve or reject a driver license",
)
async def review_license(
    user_id: uuid.UUID,
    payload: LicenseReviewRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[CallerIdentity, Depends(_require_admin)],
) -> LicenseRead:
    user = await user_service.get_user(session, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if payload.action == "reject" and not payload.reason:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A reason is required to reject a license",
        )
    user = await user_service.review_license(
        session, user, approve=payload.action == "approve", reason=payload.reason
    )
    return LicenseRead.model_validate(user)
