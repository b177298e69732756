"""OpenTelemetry tracing for the lookup service.

A trace for a lookup request covers the HTTP route (FastAPI), the
lookup_cache.load span opened on a cache miss (tracing.TracedOperation)
and the SELECT it issues (SQLAlchemy). Cache hits issue no query, so a
warm table shows up as a route span with no children.

Exporters: console (development), otlp, or none.
"""

import logging
import threading
from collections.abc import Callable

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy import Engine

from lookupcolumn.core.config import Settings
from lookupcolumn.core.constants import API_V1_PREFIX

logger = logging.getLogger(__name__)

# Health checks from orchestrators would otherwise dominate the traces.
EXCLUDED_URLS = f"{API_V1_PREFIX}/health"


def _build_exporter(exporter_type: str, otlp_endpoint: str | None) -> SpanExporter | None:
    """Return the span exporter for TELEMETRY_EXPORTER, or None for 'none'."""
    if exporter_type == "none":
        return None
    if exporter_type == "otlp" and otlp_endpoint:
        logger.info("Using OTLP span exporter: %s", otlp_endpoint)
        return OTLPSpanExporter(
            endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
        )
    if exporter_type != "console":
        logger.warning("Unknown exporter type '%s', using console", exporter_type)
    return ConsoleSpanExporter()


def _instrument(name: str, hook: Callable[[], object]) -> None:
    """Run one instrumentor; a failure leaves lookups untraced, not broken."""
    try:
        hook()
        logger.info("%s instrumentation enabled", name)
    except Exception as e:
        logger.exception("Failed to instrument %s: %s", name, e)


class TelemetryConfig:
    """Tracer provider and instrumentations for one app instance.

    Built from Settings at startup; setup() installs the global tracer
    provider that TracedOperation spans are recorded on, instrument()
    hooks the app, the lookup engine and logging into it.
    """

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
        exporter_type: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.exporter_type = exporter_type
        self.otlp_endpoint = otlp_endpoint
        self.sample_rate = sample_rate
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryConfig":
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )

    def setup(self) -> TracerProvider | None:
        """Create the tracer provider and make it global.

        Returns:
            The provider, or None if it could not be created (lookups
            keep working untraced).
        """
        try:
            resource = Resource(
                attributes={
                    SERVICE_NAME: self.service_name,
                    SERVICE_VERSION: self.service_version,
                    "deployment.environment": self.environment,
                }
            )
            provider = TracerProvider(
                resource=resource, sampler=TraceIdRatioBased(self.sample_rate)
            )
            exporter = _build_exporter(self.exporter_type, self.otlp_endpoint)
            if exporter is None:
                logger.info("Telemetry enabled but no exporter configured")
            else:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception as e:
            logger.exception("Failed to initialize telemetry: %s", e)
            return None
        self.tracer_provider = provider
        logger.info(
            "OpenTelemetry initialized: service=%s, version=%s, exporter=%s",
            self.service_name,
            self.service_version,
            self.exporter_type,
        )
        return provider

    def instrument(self, app: FastAPI, engine: Engine | None = None) -> None:
        """Instrument the diagnostics routes, the lookup engine and logging.

        engine is None when the app was given a prebuilt cache; its data
        source is then traced only through lookup_cache.load spans.
        """
        provider = self.tracer_provider
        if provider is None:
            return
        _instrument(
            "FastAPI",
            lambda: FastAPIInstrumentor.instrument_app(
                app, tracer_provider=provider, excluded_urls=EXCLUDED_URLS
            ),
        )
        if engine is not None:
            _instrument(
                "SQLAlchemy",
                lambda: SQLAlchemyInstrumentor().instrument(
                    engine=engine, tracer_provider=provider
                ),
            )
        _instrument(
            "logging",
            lambda: LoggingInstrumentor().instrument(
                tracer_provider=provider, set_logging_format=True
            ),
        )

    def shutdown(self) -> None:
        """Flush pending spans and stop the provider."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
            logger.info("Telemetry shutdown complete")
        except Exception as e:
            logger.exception("Error during telemetry shutdown: %s", e)
        finally:
            self.tracer_provider = None


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    """Return the telemetry of the running app, if enabled."""
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    """Set (or clear, with None) the telemetry of the running app."""
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
