"""lookupcolumn: cached id<->name lookups and lookup accessors for SQLAlchemy schemas."""

from lookupcolumn.application.services import (
    LookupAccessors,
    LookupCache,
    add_lookup,
    build_lookup_accessors,
)
from lookupcolumn.infrastructure.persistence.lookup_source import SqlAlchemyLookupSource

__all__ = [
    "LookupAccessors",
    "LookupCache",
    "SqlAlchemyLookupSource",
    "add_lookup",
    "build_lookup_accessors",
]
