"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

import redis.asyncio as redis  # type: ignore[import-untyped]
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi_limiter import FastAPILimiter
from secure import Secure

from sharenest.api import api_router
from sharenest.core.config import get_settings
from sharenest.core.settings import get_payment_settings
from sharenest.integrations import StripeClient, StripeClientError
from sharenest.security.logging_filters import SensitiveFilter
from sharenest.services.bootstrap_service import ensure_primary_admin

logger = logging.getLogger(__name__)

settings = get_settings()

_ALLOWED_ORIGINS = [origin for origin in settings.cors_allowlist if origin]
if not _ALLOWED_ORIGINS:
    _ALLOWED_ORIGINS = [origin for origin in settings.cors_allow_origins if origin]
if not _ALLOWED_ORIGINS:
    _ALLOWED_ORIGINS = ["http://localhost:3000"]


def _build_payment_gateway() -> StripeClient | None:
    payment_settings = get_payment_settings()
    if not payment_settings.stripe_secret_key:
        logger.warning("STRIPE_SECRET_KEY is not set; payment endpoints will fail closed")
        return None
    try:
        return StripeClient.from_settings(payment_settings)
    except StripeClientError:
        logger.exception("Failed to configure Stripe client")
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    redis_pool = None
    if settings.redis_url:
        try:
            redis_pool = redis.from_url(
                settings.redis_url, encoding="utf-8", decode_responses=True
            )
            await FastAPILimiter.init(redis_pool)
        except Exception:  # pragma: no cover - limiter startup is best effort
            logger.exception("Failed to initialize rate limiter")
    if getattr(app.state, "payment_gateway", None) is None:
        app.state.payment_gateway = _build_payment_gateway()
    try:
        await ensure_primary_admin()
    except Exception:  # pragma: no cover - best effort bootstrap
        logger.exception("Failed to promote primary admin account")
    try:
        yield
    finally:
        if isinstance(app.state.payment_gateway, StripeClient):
            await app.state.payment_gateway.aclose()
        if redis_pool is not None:
            try:
                await FastAPILimiter.close()
                await redis_pool.aclose()
            except Exception:  # pragma: no cover - limiter shutdown
                logger.exception("Failed to close rate limiter")


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.state.payment_gateway = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=_ALLOWED_ORIGINS,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Idempotency-Key", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")

_secure_headers = Secure.with_default_headers()


@app.middleware("http")
async def _apply_security_headers(request, call_next):
    response = await call_next(request)
    _secure_headers.set_headers(response)
    return response


for _logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error", ""):
    _logger = logging.getLogger(_logger_name)
    if not any(isinstance(flt, SensitiveFilter) for flt in _logger.filters):
        _logger.addFilter(SensitiveFilter())

app.include_router(api_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Return a simple welcome message."""
    return {"message": settings.app_name}
