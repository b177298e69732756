"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lookupcolumn.core.config import get_settings
from lookupcolumn.domain.exceptions import LookupColumnException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "INVALID_ARGUMENT": 400,
    "BAD_SCHEMA": 404,
    "LOOKUP_NOT_FOUND": 404,
    "ACCESSOR_CONFLICT": 409,
    "SQL_NOT_CONFIGURED": 503,
}


def _lookup_exception_handler(
    request: Request, exc: LookupColumnException
) -> JSONResponse:
    """Return JSON from LookupColumnException.to_dict() with appropriate status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    return JSONResponse(status_code=status, content=_jsonable_details(exc.to_dict()))


def _jsonable_details(content: dict[str, Any]) -> dict[str, Any]:
    """Stringify non-JSON detail values (e.g. lookup keys of arbitrary type)."""
    details = {
        key: value if isinstance(value, (str, int, float, bool, type(None))) else str(value)
        for key, value in content.get("details", {}).items()
    }
    return {**content, "details": details}


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": _validation_errors(exc),
        },
    )


def _validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Validation errors without the non-serializable 'ctx' and 'input' entries."""
    return [
        {key: value for key, value in error.items() if key not in ("ctx", "input")}
        for error in exc.errors()
    ]


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: LookupColumnException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(LookupColumnException, _lookup_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
