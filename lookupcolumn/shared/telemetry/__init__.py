"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from lookupcolumn.shared.telemetry.logging import setup_logging
from lookupcolumn.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from lookupcolumn.shared.telemetry.tracing import TracedOperation, add_span_attributes

__all__ = [
    "setup_logging",
    "TelemetryConfig",
    "get_telemetry",
    "set_telemetry",
    "TracedOperation",
    "add_span_attributes",
]
