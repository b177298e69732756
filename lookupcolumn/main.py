"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, routers. No business logic
here; see lookupcolumn.core.lifespan and lookupcolumn.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI

from lookupcolumn.api.v1 import api_router
from lookupcolumn.application.services.lookup_cache import LookupCache
from lookupcolumn.core.config import get_settings
from lookupcolumn.core.constants import API_V1_PREFIX
from lookupcolumn.core.exception_handlers import register_exception_handlers
from lookupcolumn.core.lifespan import create_lifespan


def create_app(lookup_cache: LookupCache | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        lookup_cache: Optional cache to serve instead of one built from
            DATABASE_URL at startup (tests, embedding in another app).
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.lookup_cache = lookup_cache

    register_exception_handlers(app)

    app.include_router(api_router, prefix=API_V1_PREFIX)

    return app


app = create_app()
