"""Domain exceptions for lookup caching and accessor binding.

Independent of infrastructure concerns. The HTTP layer maps them to
responses in exception handlers; library callers catch them directly.
"""

from typing import Any


class LookupColumnException(Exception):
    """Base exception for all lookupcolumn errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. table, key).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation (error, message, details)."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidLookupArgumentException(LookupColumnException):
    """Raised when a lookup is called with a missing key (None id or empty name)."""

    def __init__(self, table: str, argument: str) -> None:
        """Initialize with the lookup table and the offending argument name.

        Args:
            table: Lookup table identifier.
            argument: Name of the missing argument ('id' or 'name').
        """
        super().__init__(
            f"Missing {argument} for lookup in table [{table}]",
            "INVALID_ARGUMENT",
            {"table": table, "argument": argument},
        )


class LookupSchemaException(LookupColumnException):
    """Raised when a lookup table or column is unknown, or the key shape is unsupported."""

    def __init__(
        self,
        message: str,
        table: str,
        column: str | None = None,
    ) -> None:
        """Initialize with message, table and optional column.

        Args:
            message: Description of the schema problem.
            table: Lookup table identifier.
            column: Optional column involved.
        """
        details: dict[str, Any] = {"table": table}
        if column is not None:
            details["column"] = column
        super().__init__(message, "BAD_SCHEMA", details)


class LookupNotFoundException(LookupColumnException):
    """Raised when a key has no entry in the (cached) lookup table."""

    def __init__(self, table: str, key: Any, kind: str) -> None:
        """Initialize with table, missing key and key kind.

        Args:
            table: Lookup table identifier.
            key: The id or name that was not found.
            kind: 'id' or 'name'.
        """
        super().__init__(
            f"{kind} [{key}] does not exist in (cached) lookup table [{table}]",
            "LOOKUP_NOT_FOUND",
            {"table": table, kind: key},
        )


class AccessorConflictException(LookupColumnException):
    """Raised at bind time when a generated accessor name is already taken."""

    def __init__(self, target: str, name: str) -> None:
        """Initialize with target type name and conflicting member name.

        Args:
            target: Name of the target class.
            name: Accessor name already defined on it.
        """
        super().__init__(
            f"Method {name} already defined on {target}",
            "ACCESSOR_CONFLICT",
            {"target": target, "name": name},
        )


class SqlNotConfiguredException(LookupColumnException):
    """Raised when the SQL data source is required but DATABASE_URL is not set."""

    def __init__(self) -> None:
        """Initialize with a fixed message."""
        super().__init__(
            "SQL database is not configured: set DATABASE_URL",
            "SQL_NOT_CONFIGURED",
            {},
        )
