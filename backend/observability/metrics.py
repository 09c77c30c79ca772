"""
Metrics definitions for usage-api.

Defines all metrics using OpenTelemetry Meter API. Without a configured
MeterProvider the global no-op meter is used, so recording is always safe.
"""

import logging
from typing import Optional

from opentelemetry import metrics

logger = logging.getLogger(__name__)

# Meter name
_METER_NAME = "usage-api"


def _get_meter() -> metrics.Meter:
    """Get the metrics meter instance."""
    return metrics.get_meter(_METER_NAME)


class UsageMetrics:
    """
    Centralized metrics for usage-api.

    All metrics are lazily initialized on first access.
    """

    _usage_checks_total: Optional[metrics.Counter] = None
    _usage_increments_total: Optional[metrics.Counter] = None
    _quota_exhausted_total: Optional[metrics.Counter] = None
    _endpoint_errors_total: Optional[metrics.Counter] = None

    @classmethod
    def usage_checks_total(cls) -> metrics.Counter:
        """Counter for quota checks served."""
        if cls._usage_checks_total is None:
            cls._usage_checks_total = _get_meter().create_counter(
                name="usage_checks_total",
                description="Total number of usage checks",
                unit="1",
            )
        return cls._usage_checks_total

    @classmethod
    def usage_increments_total(cls) -> metrics.Counter:
        """Counter for recorded queries by increment mode."""
        if cls._usage_increments_total is None:
            cls._usage_increments_total = _get_meter().create_counter(
                name="usage_increments_total",
                description="Total number of recorded queries",
                unit="1",
            )
        return cls._usage_increments_total

    @classmethod
    def quota_exhausted_total(cls) -> metrics.Counter:
        """Counter for checks that answered can_query=false."""
        if cls._quota_exhausted_total is None:
            cls._quota_exhausted_total = _get_meter().create_counter(
                name="quota_exhausted_total",
                description="Checks where the daily quota was used up",
                unit="1",
            )
        return cls._quota_exhausted_total

    @classmethod
    def endpoint_errors_total(cls) -> metrics.Counter:
        """Counter for 500 responses by endpoint and error type."""
        if cls._endpoint_errors_total is None:
            cls._endpoint_errors_total = _get_meter().create_counter(
                name="endpoint_errors_total",
                description="Total endpoint failures",
                unit="1",
            )
        return cls._endpoint_errors_total
