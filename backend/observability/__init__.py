"""
OpenTelemetry observability package for usage-api.

Usage:
    from backend.observability import configure_observability, traced, UsageMetrics

    # Initialize in application startup
    configure_observability(settings)

    # Use decorator for automatic tracing
    @traced
    def execute(self, user_id):
        ...

    # Record metrics
    UsageMetrics.usage_checks_total().add(1)
"""

from backend.observability.config import (
    configure_observability,
    instrument_app,
    shutdown_observability,
)
from backend.observability.metrics import UsageMetrics
from backend.observability.tracing import add_span_attributes, get_tracer, traced

__all__ = [
    # Configuration
    "configure_observability",
    "instrument_app",
    "shutdown_observability",
    # Tracing
    "get_tracer",
    "traced",
    "add_span_attributes",
    # Metrics
    "UsageMetrics",
]
