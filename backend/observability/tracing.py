"""
Tracing utilities for OpenTelemetry.

Provides the @traced decorator and get_tracer() helper.
"""

import functools
import logging
from typing import Any, Callable, Optional, TypeVar, Union

from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_DEFAULT_TRACER_NAME = "usage-api"


def get_tracer(name: Optional[str] = None) -> trace.Tracer:
    """Get an OpenTelemetry tracer instance (defaults to "usage-api")."""
    return trace.get_tracer(name or _DEFAULT_TRACER_NAME)


def traced(
    _func: Optional[Callable] = None,
    *,
    name: Optional[str] = None,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: Optional[dict] = None,
) -> Union[Callable[[F], F], F]:
    """
    Decorator to create a span around a synchronous function.

    Can be used with or without parentheses:

        @traced
        def execute(self, user_id):
            ...

        @traced(name="usage.increment")
        def execute(self, user_id):
            ...
    """
    def decorator(func: F) -> F:
        span_name = name or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with get_tracer().start_as_current_span(
                span_name,
                kind=kind,
                attributes=attributes,
            ) as span:
                try:
                    result = func(*args, **kwargs)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise

        return wrapper  # type: ignore

    # Handle @traced without parentheses
    if _func is not None:
        return decorator(_func)

    return decorator


def add_span_attributes(attributes: dict) -> None:
    """Add attributes to the current span."""
    span = trace.get_current_span()
    if span and span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)
