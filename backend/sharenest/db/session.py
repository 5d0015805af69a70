"""Async engine and session factories, one per database URL."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, NamedTuple

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from sharenest.core.config import get_settings


class _Binding(NamedTuple):
    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]


_bindings: dict[str, _Binding] = {}


def _engine_options(url: str, timeout: float) -> dict[str, Any]:
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        return {"connect_args": {"timeout": timeout}}
    if backend == "postgresql":
        # asyncpg: connect timeout plus per-statement timeout
        return {
            "pool_pre_ping": True,
            "pool_timeout": timeout,
            "connect_args": {"timeout": timeout, "command_timeout": timeout},
        }
    return {"pool_pre_ping": True}


def get_sessionmaker(
    database_url: str | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Return the cached sessionmaker for ``database_url`` (default: settings)."""
    settings = get_settings()
    url = database_url or settings.database_url
    binding = _bindings.get(url)
    if binding is None:
        engine = create_async_engine(
            url, **_engine_options(url, settings.database_timeout_seconds)
        )
        binding = _Binding(
            engine, async_sessionmaker(engine, expire_on_commit=False)
        )
        _bindings[url] = binding
    return binding.sessionmaker


async def get_session() -> AsyncIterator[AsyncSession]:
    async with get_sessionmaker()() as session:
        yield session


async def dispose_engine(database_url: str | None = None) -> None:
    """Close pooled connections and forget the binding for ``database_url``."""
    binding = _bindings.pop(database_url or get_settings().database_url, None)
    if binding is not None:
        await binding.engine.dispose()
