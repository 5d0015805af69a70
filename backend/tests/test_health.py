"""Health endpoint and application middleware smoke tests."""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from sharenest.main import app
from sharenest.security.logging_filters import REDACTED, SensitiveFilter


@pytest.mark.asyncio
async def test_healthcheck_returns_ok() -> None:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["service"] == "ShareNest API"
    assert payload["payments"] == "unconfigured"
    assert response.headers["X-Request-ID"]
    assert "x-content-type-options" in response.headers


def test_sensitive_filter_scrubs_client_secrets() -> None:
    record = logging.LogRecord(
        name="sharenest",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="created %s with key sk_test_abc123",
        args=("pi_3Nx_secret_Yz9",),
        exc_info=None,
    )
    assert SensitiveFilter().filter(record) is True
    message = record.getMessage()
    assert "pi_3Nx_secret_Yz9" not in message
    assert "sk_test_abc123" not in message
    assert REDACTED in message
