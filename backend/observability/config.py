"""
OpenTelemetry SDK configuration and initialization.

Configures TracerProvider, MeterProvider, and FastAPI auto-instrumentation.
"""

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from backend.settings import Settings

logger = logging.getLogger(__name__)

# Track initialization state
_initialized = False


def configure_observability(settings: "Settings") -> None:
    """
    Configure OpenTelemetry SDK with tracing and metrics.

    Failures are logged and never prevent the service from starting.

    Args:
        settings: Application settings with OTel configuration.
    """
    global _initialized

    if _initialized:
        logger.debug("OpenTelemetry already initialized, skipping")
        return

    if not settings.otel_enabled:
        logger.info("OpenTelemetry disabled via settings")
        return

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_VERSION
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

        resource_attributes = {
            SERVICE_NAME: settings.otel_service_name,
            SERVICE_VERSION: "1.0.0",
            "deployment.environment": settings.environment,
        }
        if settings.render_git_commit:
            resource_attributes["service.instance.id"] = settings.render_git_commit

        resource = Resource.create(resource_attributes)
        tracer_provider = TracerProvider(
            resource=resource,
            sampler=TraceIdRatioBased(settings.otel_traces_sample_rate),
        )

        if settings.otel_exporter_otlp_endpoint:
            _configure_otlp_exporter(tracer_provider, settings.otel_exporter_otlp_endpoint)
        else:
            # Console exporter for development
            _configure_console_exporter(tracer_provider)

        trace.set_tracer_provider(tracer_provider)

        _configure_meter_provider(
            resource,
            settings.otel_exporter_otlp_endpoint,
            settings.otel_metrics_export_interval_ms,
        )

        _initialized = True
        logger.info(
            "OpenTelemetry initialized: service=%s, sample_rate=%.2f, endpoint=%s",
            settings.otel_service_name,
            settings.otel_traces_sample_rate,
            settings.otel_exporter_otlp_endpoint or "console",
        )

    except Exception as e:
        logger.error("Failed to initialize OpenTelemetry: %s", e)


def instrument_app(app) -> None:
    """Attach FastAPI server spans to an app once tracing is configured."""
    if not _initialized:
        return
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

    FastAPIInstrumentor.instrument_app(app)
    logger.debug("FastAPI auto-instrumentation enabled")


def _configure_otlp_exporter(tracer_provider, endpoint: str) -> None:
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    # HTTP endpoint needs the /v1/traces suffix
    http_endpoint = endpoint.rstrip("/") + "/v1/traces"
    tracer_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=http_endpoint))
    )


def _configure_console_exporter(tracer_provider) -> None:
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

    tracer_provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))


def _configure_meter_provider(
    resource,
    endpoint: Optional[str],
    metrics_interval_ms: int,
) -> None:
    """Configure MeterProvider; without an endpoint metrics stay in-process."""
    from opentelemetry import metrics
    from opentelemetry.sdk.metrics import MeterProvider
    from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader

    readers = []
    if endpoint:
        from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter

        readers.append(PeriodicExportingMetricReader(
            OTLPMetricExporter(endpoint=endpoint.rstrip("/") + "/v1/metrics"),
            export_interval_millis=metrics_interval_ms,
        ))

    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=readers))


def shutdown_observability() -> None:
    """Shutdown OpenTelemetry providers gracefully."""
    global _initialized

    if not _initialized:
        return

    try:
        from opentelemetry import metrics, trace

        tracer_provider = trace.get_tracer_provider()
        if hasattr(tracer_provider, "shutdown"):
            tracer_provider.shutdown()

        meter_provider = metrics.get_meter_provider()
        if hasattr(meter_provider, "shutdown"):
            meter_provider.shutdown()

        _initialized = False
        logger.info("OpenTelemetry shutdown complete")
    except Exception as e:
        logger.error("Error during OpenTelemetry shutdown: %s", e)
