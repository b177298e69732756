"""Lookup endpoints: resolve ids and names, inspect and invalidate the cache.

Handlers are sync: the first lookup of a table runs a blocking query,
so FastAPI executes them in its threadpool.
"""

from collections.abc import Hashable
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from lookupcolumn.api.v1.dependencies import get_default_field_name, get_lookup_cache
from lookupcolumn.application.services.lookup_cache import LookupCache
from lookupcolumn.domain.lookup import LookupBucket
from lookupcolumn.schemas.lookup import (
    CachedTableResponse,
    CacheSnapshotResponse,
    LookupEntryResponse,
)

router = APIRouter()

CacheDep = Annotated[LookupCache, Depends(get_lookup_cache)]
DefaultFieldDep = Annotated[str, Depends(get_default_field_name)]


def _match_path_id(bucket: LookupBucket, raw_id: str) -> Hashable:
    """Return the cached key whose text form is raw_id, else raw_id itself.

    Path segments are always text; lookup keys may be integers, strings
    or any other type the database returns.
    """
    for key in bucket.id_to_name:
        if str(key) == raw_id:
            return key
    return raw_id


@router.get("/cache", response_model=CacheSnapshotResponse)
def inspect_cache(cache: CacheDep) -> CacheSnapshotResponse:
    """Return every cached lookup table with its entries."""
    snapshot = cache.inspect_cache()
    return CacheSnapshotResponse(
        tables=[
            CachedTableResponse.from_bucket(snapshot[table])
            for table in sorted(snapshot)
        ]
    )


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
def reset_cache(cache: CacheDep) -> Response:
    """Drop every cached table; they reload on next use."""
    cache.reset_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/cache/{table}", status_code=status.HTTP_204_NO_CONTENT)
def reset_cache_table(table: str, cache: CacheDep) -> Response:
    """Drop one cached table. Succeeds even if it was not cached."""
    cache.reset_table(table)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{table}/names/{lookup_id}", response_model=LookupEntryResponse)
def get_name_by_id(
    table: str,
    lookup_id: str,
    cache: CacheDep,
    default_field: DefaultFieldDep,
    field_name: Annotated[str | None, Query(min_length=1)] = None,
) -> LookupEntryResponse:
    """Resolve a lookup id to its name."""
    field = field_name or default_field
    key = _match_path_id(cache.ensure_loaded(table, field), lookup_id)
    name = cache.fetch_name_by_id(table, field, key)
    return LookupEntryResponse(table=table, id=key, name=name)


@router.get("/{table}/ids", response_model=LookupEntryResponse)
def get_id_by_name(
    table: str,
    name: Annotated[str, Query(min_length=1)],
    cache: CacheDep,
    default_field: DefaultFieldDep,
    field_name: Annotated[str | None, Query(min_length=1)] = None,
) -> LookupEntryResponse:
    """Resolve a lookup name to its id."""
    lookup_id = cache.fetch_id_by_name(table, field_name or default_field, name)
    return LookupEntryResponse(table=table, id=lookup_id, name=name)
