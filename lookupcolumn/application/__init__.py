"""Application layer: interfaces and services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (data sources).
"""

from lookupcolumn.application.interfaces import ILookupDataSource
from lookupcolumn.application.services import (
    LookupAccessors,
    LookupCache,
    add_lookup,
    build_lookup_accessors,
)

__all__ = [
    "ILookupDataSource",
    "LookupAccessors",
    "LookupCache",
    "add_lookup",
    "build_lookup_accessors",
]
