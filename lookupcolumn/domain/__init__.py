"""Domain layer: lookup bucket and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from lookupcolumn.domain.exceptions import (
    AccessorConflictException,
    InvalidLookupArgumentException,
    LookupColumnException,
    LookupNotFoundException,
    LookupSchemaException,
    SqlNotConfiguredException,
)
from lookupcolumn.domain.lookup import LookupBucket

__all__ = [
    "AccessorConflictException",
    "InvalidLookupArgumentException",
    "LookupBucket",
    "LookupColumnException",
    "LookupNotFoundException",
    "LookupSchemaException",
    "SqlNotConfiguredException",
]
