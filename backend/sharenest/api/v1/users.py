"""Profile endpoints for the authenticated caller."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.api import deps
from sharenest.api.errors import to_http_exception
from sharenest.core.errors import SharenestError
from sharenest.schemas.user import ProfileProvisionRequest, UserRead
from sharenest.services import identity_service, user_service
from sharenest.services.identity_service import CallerIdentity

router = APIRouter()


@router.get("/me", response_model=UserRead, summary="Current user profile")
async def read_current_user(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    caller: Annotated[CallerIdentity, Depends(deps.get_current_caller)],
) -> UserRead:
    """Return the authenticated user's profile."""
    user = await user_service.get_user(session, caller.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserRead.model_validate(user)


@router.post(
    "/me/profile",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Provision the caller's profile",
)
async def provision_current_profile(
    payload: ProfileProvisionRequest,
    response: Response,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    token: Annotated[str | None, Depends(deps.get_bearer_token)],
) -> UserRead:
    """Create the profile for a credential that has none; existing profiles return 200."""
    try:
        user, created = await identity_service.provision_profile(
            session, token, name=payload.name, phone_number=payload.phone_number
        )
    except SharenestError as exc:
        raise to_http_exception(exc) from exc
    if not created:
        response.status_code = status.HTTP_200_OK
    return UserRead.model_validate(user)
