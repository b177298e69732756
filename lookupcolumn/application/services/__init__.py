"""Application services: lookup cache and lookup accessors."""

from lookupcolumn.application.services.lookup_accessors import (
    LookupAccessors,
    add_lookup,
    build_lookup_accessors,
)
from lookupcolumn.application.services.lookup_cache import LookupCache

__all__ = [
    "LookupAccessors",
    "LookupCache",
    "add_lookup",
    "build_lookup_accessors",
]
