"""Translate domain failures into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from sharenest.core.errors import SharenestError


def to_http_exception(exc: SharenestError) -> HTTPException:
    """Build the ``HTTPException`` a router raises for a domain failure.

    The body carries ``code``, ``message`` and ``retryable`` so clients can
    tell a retryable confirmation failure from one that needs a new payment.
    """

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(
        status_code=exc.status_code, detail=exc.to_dict(), headers=headers
    )


__all__ = ["to_http_exception"]
