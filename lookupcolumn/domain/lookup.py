"""Lookup bucket: the cached bidirectional id/name mapping of one lookup table."""

from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class LookupBucket:
    """Immutable id<->name maps for one lookup table, built from a single query.

    Both maps are read-only views created together, so a bucket is either
    fully populated or not visible at all.
    """

    table: str
    field_name: str
    id_to_name: Mapping[Hashable, Any]
    name_to_id: Mapping[Any, Hashable]
    loaded_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_pairs(
        cls, table: str, field_name: str, pairs: Iterable[tuple[Hashable, Any]]
    ) -> "LookupBucket":
        """Build both maps from (id, name) pairs in one pass."""
        id_to_name: dict[Hashable, Any] = {}
        name_to_id: dict[Any, Hashable] = {}
        for key, name in pairs:
            id_to_name[key] = name
            name_to_id[name] = key
        return cls(
            table=table,
            field_name=field_name,
            id_to_name=MappingProxyType(id_to_name),
            name_to_id=MappingProxyType(name_to_id),
        )

    def __len__(self) -> int:
        return len(self.id_to_name)
