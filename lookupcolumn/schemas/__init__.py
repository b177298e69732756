"""API request/response schemas (pydantic)."""

from lookupcolumn.schemas.health import HealthResponse
from lookupcolumn.schemas.lookup import (
    CachedTableResponse,
    CacheSnapshotResponse,
    LookupEntryResponse,
)

__all__ = [
    "CachedTableResponse",
    "CacheSnapshotResponse",
    "HealthResponse",
    "LookupEntryResponse",
]
