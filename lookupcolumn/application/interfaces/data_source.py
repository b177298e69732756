"""Data-source interface (port) consumed by the lookup cache.

Any adapter exposing these four capabilities can back a LookupCache;
the SQLAlchemy implementation lives in infrastructure.persistence.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator, Sequence
from typing import Any, Protocol


class ILookupDataSource(Protocol):
    """Protocol for lookup-table metadata and bulk reads (DIP)."""

    def schema_has_table(self, table: str) -> bool:
        """Return True if the schema defines the lookup table."""
        ...

    def table_has_column(self, table: str, column: str) -> bool:
        """Return True if the table has the given column."""
        ...

    def primary_key_columns(self, table: str) -> Sequence[str]:
        """Return the primary key column names of the table, in order."""
        ...

    def query_all_pairs(
        self, table: str, primary_key_column: str, field_name: str
    ) -> Iterator[tuple[Hashable, Any]]:
        """Yield (key, value) for every row of the table exactly once, any order."""
        ...
