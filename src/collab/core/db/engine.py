"""Database engine management."""

import ssl
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.collab.core.config import Settings, get_settings

_engine: AsyncEngine | None = None


def _ssl_context(mode: str) -> ssl.SSLContext | None:
    """SSL context for a libpq-style ``sslmode`` value; None disables SSL."""
    match mode:
        case "disable":
            return None
        case "prefer" | "require":
            context = ssl.create_default_context()
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
            return context
        case "verify-ca" | "verify-full":
            context = ssl.create_default_context()
            context.check_hostname = mode == "verify-full"
            context.verify_mode = ssl.CERT_REQUIRED
            return context
        case _:
            raise ValueError(f"Unsupported DATABASE_SSL_MODE '{mode}'")


def _connect_args(settings: Settings) -> dict[str, Any]:
    """asyncpg connect arguments: SSL plus an application name for pg_stat_activity."""
    connect_args: dict[str, Any] = {
        "server_settings": {"application_name": settings.app_name[:63]},
    }
    context = _ssl_context(settings.database_ssl_mode)
    if context is not None:
        connect_args["ssl"] = context
    return connect_args


def get_engine() -> AsyncEngine:
    """Get or create the process-wide engine. The only long-lived resource."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            connect_args=_connect_args(settings),
        )
    return _engine


async def dispose_engine() -> None:
    """Dispose the engine. Called on shutdown and between integration tests."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
