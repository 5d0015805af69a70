"""Authentication endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.api.deps import get_db_session
from sharenest.api.errors import to_http_exception
from sharenest.api.v1.rate_limits import DEFAULT_RATE_DEP, LOGIN_RATE_DEP
from sharenest.core.errors import SharenestError
from sharenest.schemas.auth import RegistrationRequest, RegistrationResponse, Token
from sharenest.schemas.user import UserCreate, UserRead
from sharenest.services import user_service
from sharenest.services.identity_service import (
    authenticate_user,
    create_access_token_for_user,
)

router = APIRouter()


@router.post(
    "/token",
    response_model=Token,
    summary="Obtain access token",
    dependencies=[LOGIN_RATE_DEP],
)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> Token:
    """Validate credentials and issue a bearer token."""
    user = await authenticate_user(
        session, email=form_data.username, password=form_data.password
    )
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(access_token=create_access_token_for_user(user))


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register renter",
    dependencies=[DEFAULT_RATE_DEP],
)
async def register_renter(
    payload: RegistrationRequest,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> RegistrationResponse:
    existing = await user_service.get_user_by_email(session, email=payload.email)
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
        )
    try:
        user = await user_service.create_user(
            session,
            UserCreate(
                email=payload.email,
                password=payload.password,
                name=payload.name,
                phone_number=payload.phone_number,
            ),
            license_number=payload.license_number,
        )
    except SharenestError as exc:
        raise to_http_exception(exc) from exc
    return RegistrationResponse(
        token=Token(access_token=create_access_token_for_user(user)),
        user=UserRead.model_validate(user),
    )
