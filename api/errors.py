"""
Uniform failure responses for the usage endpoints.

Every failure, whether authentication, storage, or unexpected, becomes a 500
with {"error": message}. The error type is only visible in logs and metrics.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from application.exceptions import UsageServiceError
from backend.observability import UsageMetrics

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown error"


def error_message(error: Exception) -> str:
    if isinstance(error, UsageServiceError):
        return error.message
    return str(error) or UNKNOWN_ERROR_MESSAGE


def error_response(component: str, error: Exception) -> JSONResponse:
    """Log a failure under a component tag and build the 500 response."""
    message = error_message(error)
    if isinstance(error, UsageServiceError):
        logger.error("[%s] Error: %s", component, message)
    else:
        logger.exception("[%s] Error: %s", component, message)

    UsageMetrics.endpoint_errors_total().add(
        1, {"component": component, "error_type": type(error).__name__}
    )
    return JSONResponse(status_code=500, content={"error": message})


def component_tag(request: Request) -> str:
    """Tag for a request path, e.g. /check-usage -> CHECK-USAGE."""
    return request.url.path.strip("/").replace("/", "-").upper() or "USAGE-API"


async def usage_service_error_handler(request: Request, exc: UsageServiceError) -> JSONResponse:
    """Handles errors raised while resolving dependencies, before a route runs."""
    return error_response(component_tag(request), exc)
