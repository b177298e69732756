"""Lookup cache: lazy, bidirectional id<->name cache for lookup tables.

Each lookup table is read with a single query the first time it is
needed, then served from memory until it is invalidated with
reset_table() or reset_all(). Only tables with exactly one primary key
column are supported.

Thread-safe: the bucket mapping is guarded by a lock and each table has
its own load lock, so concurrent first access to a table issues one
query and readers never see a partially built bucket. A load that
overlaps a reset returns its rows to the caller but is not cached.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Hashable
from typing import Any

from lookupcolumn.application.interfaces import ILookupDataSource
from lookupcolumn.domain.exceptions import (
    InvalidLookupArgumentException,
    LookupNotFoundException,
    LookupSchemaException,
)
from lookupcolumn.domain.lookup import LookupBucket
from lookupcolumn.shared.telemetry.tracing import TracedOperation, add_span_attributes

logger = logging.getLogger(__name__)


class LookupCache:
    """Table-keyed id<->name cache backed by an ILookupDataSource.

    One instance per schema/connection; inject it into every consumer
    (accessors, API dependencies) instead of sharing module state.
    """

    def __init__(self, data_source: ILookupDataSource) -> None:
        self._data_source = data_source
        self._buckets: dict[str, LookupBucket] = {}
        self._lock = threading.Lock()
        self._table_locks: dict[str, threading.Lock] = {}
        # Bumped on invalidation; a load only installs if both are unchanged.
        self._epoch = 0
        self._generations: dict[str, int] = {}

    def fetch_id_by_name(self, table: str, field_name: str, name: Any) -> Hashable:
        """Return the id stored in the lookup table for the given name.

        Args:
            table: Lookup table identifier (e.g. 'PermissionType').
            field_name: Column holding the names (e.g. 'name').
            name: Name to resolve.

        Returns:
            Primary key value of the matching row.

        Raises:
            InvalidLookupArgumentException: name is None or empty.
            LookupSchemaException: unknown table/column or unsupported key.
            LookupNotFoundException: name not in the cached table.
        """
        if name is None or name == "":
            raise InvalidLookupArgumentException(table, "name")
        bucket = self.ensure_loaded(table, field_name)
        try:
            return bucket.name_to_id[name]
        except KeyError:
            raise LookupNotFoundException(table, name, "name") from None

    def fetch_name_by_id(self, table: str, field_name: str, lookup_id: Hashable) -> Any:
        """Return the name stored in the lookup table for the given id.

        Raises:
            InvalidLookupArgumentException: lookup_id is None.
            LookupSchemaException: unknown table/column or unsupported key.
            LookupNotFoundException: id not in the cached table.
        """
        if lookup_id is None:
            raise InvalidLookupArgumentException(table, "id")
        bucket = self.ensure_loaded(table, field_name)
        try:
            return bucket.id_to_name[lookup_id]
        except KeyError:
            raise LookupNotFoundException(table, lookup_id, "id") from None

    def ensure_loaded(self, table: str, field_name: str) -> LookupBucket:
        """Return the bucket for table, loading it with one query if absent.

        An existing bucket is returned as is, even when it was built from a
        different field_name; callers must use one field per table.
        """
        primary_key = self._validate_schema(table, field_name)

        bucket = self._buckets.get(table)
        if bucket is not None:
            self._check_field_name(bucket, field_name)
            return bucket

        with self._table_lock(table):
            # Another thread may have loaded it while we waited.
            bucket = self._buckets.get(table)
            if bucket is not None:
                self._check_field_name(bucket, field_name)
                return bucket
            generation = self._generation(table)
            bucket = self._load(table, primary_key, field_name)
            with self._lock:
                if self._generation_unlocked(table) == generation:
                    self._buckets[table] = bucket
                else:
                    logger.info(
                        "Lookup table %s was reset during load; result not cached", table
                    )
        return bucket

    def reset_all(self) -> None:
        """Drop every cached bucket; next lookups reload lazily."""
        with self._lock:
            count = len(self._buckets)
            self._buckets.clear()
            self._epoch += 1
        logger.info("Lookup cache cleared (%d tables)", count)

    def reset_table(self, table: str) -> None:
        """Drop the bucket of one table. No-op if it was never loaded."""
        with self._lock:
            removed = self._buckets.pop(table, None)
            self._generations[table] = self._generations.get(table, 0) + 1
        if removed is not None:
            logger.info("Lookup cache reset for table %s", table)

    def inspect_cache(self) -> dict[str, LookupBucket]:
        """Return a snapshot of the cache (diagnostics and tests only)."""
        with self._lock:
            return dict(self._buckets)

    def cached_tables(self) -> list[str]:
        """Return the names of currently cached tables, sorted."""
        with self._lock:
            return sorted(self._buckets)

    def _table_lock(self, table: str) -> threading.Lock:
        with self._lock:
            return self._table_locks.setdefault(table, threading.Lock())

    def _generation(self, table: str) -> tuple[int, int]:
        with self._lock:
            return self._generation_unlocked(table)

    def _generation_unlocked(self, table: str) -> tuple[int, int]:
        return (self._epoch, self._generations.get(table, 0))

    def _validate_schema(self, table: str, field_name: str) -> str:
        """Check table, column and single primary key; return the key column."""
        source = self._data_source
        if not source.schema_has_table(table):
            raise LookupSchemaException(f"Unknown table called {table}", table)
        if not source.table_has_column(table, field_name):
            raise LookupSchemaException(
                f"The {field_name} as field name does not exist in the {table} lookup table",
                table,
                field_name,
            )
        primary_columns = list(source.primary_key_columns(table))
        if not primary_columns:
            raise LookupSchemaException(
                f"No primary key defined in lookup table {table}", table
            )
        if len(primary_columns) > 1:
            raise LookupSchemaException(
                f"Only lookup tables with ONE primary key are supported, {table} has "
                f"{len(primary_columns)}",
                table,
            )
        return primary_columns[0]

    def _load(self, table: str, primary_key: str, field_name: str) -> LookupBucket:
        """Query all (primary_key, field_name) pairs and build the bucket."""
        with TracedOperation(
            "lookup_cache.load",
            {"lookup.table": table, "lookup.field_name": field_name},
        ):
            pairs = self._data_source.query_all_pairs(table, primary_key, field_name)
            bucket = LookupBucket.from_pairs(table, field_name, pairs)
            add_span_attributes(lookup_rows=len(bucket))
        if len(bucket.name_to_id) != len(bucket.id_to_name):
            logger.warning(
                "Lookup table %s has duplicate values in %s; name->id keeps the last row",
                table,
                field_name,
            )
        logger.debug(
            "Loaded lookup table %s (%s -> %s): %d rows",
            table,
            primary_key,
            field_name,
            len(bucket),
        )
        return bucket

    @staticmethod
    def _check_field_name(bucket: LookupBucket, field_name: str) -> None:
        if bucket.field_name != field_name:
            logger.warning(
                "Lookup table %s is cached by field %s; ignoring requested field %s",
                bucket.table,
                bucket.field_name,
                field_name,
            )
