"""Persistence: the SQLAlchemy engine behind the lookup data source.

The engine is created lazily on first use (get_engine) so import does
not trigger Settings validation. Lookup loads are synchronous, so a sync
Engine is used; FastAPI runs the lookup endpoints in its threadpool.
"""

import logging
from typing import Any

from sqlalchemy import Engine, create_engine

from lookupcolumn.core.config import get_settings

logger = logging.getLogger(__name__)

# Set by get_engine() on first use; avoids get_settings() at import time.
engine: Engine | None = None


def _connect_args(database_url: str, command_timeout: int | None) -> dict[str, Any]:
    """Driver-specific connect args for the configured timeout."""
    if command_timeout is None:
        return {}
    if database_url.startswith("sqlite"):
        return {"timeout": command_timeout}
    if database_url.startswith("postgresql"):
        return {"options": f"-c statement_timeout={command_timeout * 1000}"}
    return {}


def get_engine() -> Engine | None:
    """Return the process engine, creating it on first use.

    Returns None when DATABASE_URL is not set; the app then starts with
    the lookup endpoints disabled.
    """
    global engine
    if engine is not None:
        return engine
    settings = get_settings()
    if not settings.database_url:
        return None
    engine = create_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=settings.db_pool_pre_ping,
        connect_args=_connect_args(settings.database_url, settings.db_command_timeout),
    )
    logger.info("Database engine created (%s)", engine.url.render_as_string(hide_password=True))
    return engine


def dispose_engine() -> None:
    """Dispose the engine's pool and forget it. Call on app shutdown."""
    global engine
    if engine is not None:
        engine.dispose()
        engine = None
        logger.info("Database engine disposed")
