"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags.
"""

from fastapi import APIRouter

from lookupcolumn.api.v1.endpoints import health, lookups

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(lookups.router, prefix="/lookups", tags=["lookups"])
