"""Health check endpoints."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends

from sharenest.api import deps
from sharenest.core.config import get_settings
from sharenest.integrations import PaymentGateway

router = APIRouter()


@router.get("", summary="Service health status")
async def healthcheck(
    gateway: Annotated[PaymentGateway | None, Depends(deps.get_payment_gateway)],
) -> dict[str, str]:
    """Return application health metadata."""
    settings = get_settings()
    return {
        "status": "ok",
        "service": settings.app_name,
        "timestamp": datetime.now(UTC).isoformat(),
        "environment": settings.app_env,
        "payments": "configured" if gateway is not None else "unconfigured",
    }
