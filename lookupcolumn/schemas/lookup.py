"""Lookup API schemas: resolved entries and cache snapshots."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from lookupcolumn.domain.lookup import LookupBucket


class LookupEntryResponse(BaseModel):
    """One resolved (id, name) pair of a lookup table."""

    table: str
    id: Any = Field(..., description="Primary key value in the lookup table")
    name: Any = Field(..., description="Value of the name column")


class CachedTableResponse(BaseModel):
    """Snapshot of one cached lookup table."""

    table: str
    field_name: str
    size: int
    loaded_at: datetime
    entries: list[LookupEntryResponse]

    @classmethod
    def from_bucket(cls, bucket: LookupBucket) -> "CachedTableResponse":
        return cls(
            table=bucket.table,
            field_name=bucket.field_name,
            size=len(bucket),
            loaded_at=bucket.loaded_at,
            entries=[
                LookupEntryResponse(table=bucket.table, id=key, name=name)
                for key, name in bucket.id_to_name.items()
            ],
        )


class CacheSnapshotResponse(BaseModel):
    """Response for GET /lookups/cache."""

    tables: list[CachedTableResponse] = Field(default_factory=list)
