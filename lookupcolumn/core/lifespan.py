"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring: logging, telemetry, SQL
engine, lookup data source and cache. No business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from lookupcolumn.application.services.lookup_cache import LookupCache
from lookupcolumn.core.config import Settings, get_settings
from lookupcolumn.infrastructure.persistence.database import dispose_engine, get_engine
from lookupcolumn.infrastructure.persistence.lookup_source import SqlAlchemyLookupSource
from lookupcolumn.shared.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
    setup_logging,
)

logger = logging.getLogger(__name__)


def _preload(cache: LookupCache, settings: Settings) -> None:
    for table in settings.preload_tables:
        cache.ensure_loaded(table, settings.lookup_default_field_name)
    if settings.preload_tables:
        logger.info("Preloaded lookup tables: %s", ", ".join(settings.preload_tables))


def _shutdown(app: FastAPI, owns_engine: bool) -> None:
    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.shutdown()
        set_telemetry(None)

    if owns_engine:
        app.state.lookup_cache = None
        dispose_engine()


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, telemetry (if enabled), engine and lookup
    cache (unless a cache was injected into create_app), preload of
    LOOKUP_PRELOAD_TABLES. Shutdown: telemetry, engine dispose. A failed
    preload runs the shutdown steps before the error propagates.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    telemetry: TelemetryConfig | None = None
    if settings.telemetry_enabled:
        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.setup()
        set_telemetry(telemetry)

    owns_engine = False
    engine = None
    if getattr(app.state, "lookup_cache", None) is None:
        engine = get_engine()
        if engine is None:
            logger.warning("DATABASE_URL not set; lookup endpoints are disabled")
            app.state.lookup_cache = None
        else:
            owns_engine = True

    if telemetry is not None:
        telemetry.instrument(app, engine)

    try:
        if engine is not None:
            app.state.lookup_cache = LookupCache(SqlAlchemyLookupSource.reflect(engine))
        cache: LookupCache | None = app.state.lookup_cache
        if cache is not None:
            _preload(cache, settings)
    except Exception:
        logger.exception("Lookup cache startup failed")
        _shutdown(app, owns_engine)
        raise

    yield

    # ---- Shutdown ----
    _shutdown(app, owns_engine)
