"""Lookup cache dependency (composition root for API routes)."""

from fastapi import Request

from lookupcolumn.application.services.lookup_cache import LookupCache
from lookupcolumn.core.config import get_settings
from lookupcolumn.domain.exceptions import SqlNotConfiguredException


def get_lookup_cache(request: Request) -> LookupCache:
    """Return the app's LookupCache (created in lifespan or injected by create_app).

    Raises:
        SqlNotConfiguredException: no cache because DATABASE_URL is not set.
    """
    cache = getattr(request.app.state, "lookup_cache", None)
    if cache is None:
        raise SqlNotConfiguredException()
    return cache


def get_default_field_name() -> str:
    """Default lookup name column from settings."""
    return get_settings().lookup_default_field_name
