"""Common API dependencies."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from sharenest.api.errors import to_http_exception
from sharenest.core.config import get_settings
from sharenest.core.errors import ProfileNotFound, SharenestError, Unauthenticated
from sharenest.db.session import get_session
from sharenest.integrations import PaymentGateway
from sharenest.models.user import UserRole
from sharenest.services import identity_service
from sharenest.services.identity_service import CallerIdentity

settings = get_settings()

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.api_v1_prefix}/auth/token", auto_error=False
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


async def get_bearer_token(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> str | None:
    return token


async def get_current_caller(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> CallerIdentity:
    """Authenticate request via bearer token."""
    try:
        return await identity_service.resolve_caller(session, token)
    except SharenestError as exc:
        raise to_http_exception(exc) from exc


async def get_optional_caller(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> CallerIdentity | None:
    """Resolve the caller when a usable credential is present, else ``None``."""
    if not token:
        return None
    try:
        return await identity_service.resolve_caller(session, token)
    except (Unauthenticated, ProfileNotFound):
        return None


def require_role(required_role: UserRole):
    """Dependency factory admitting callers ranked at or above ``required_role``."""

    async def _dependency(
        caller: Annotated[CallerIdentity, Depends(get_current_caller)],
    ) -> CallerIdentity:
        try:
            return identity_service.require_role(caller, required_role)
        except SharenestError as exc:
            raise to_http_exception(exc) from exc

    return _dependency


def get_payment_gateway(request: Request) -> PaymentGateway | None:
    """Return the gateway built at startup; ``None`` when payments are unconfigured."""
    return getattr(request.app.state, "payment_gateway", None)
