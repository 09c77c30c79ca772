"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings
- Multiple app instances with different configurations
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings)
"""

import logging
from typing import Dict, List, Optional

import sentry_sdk
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from application.exceptions import UsageServiceError
from backend.observability import configure_observability, instrument_app, shutdown_observability
from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# Headers the web client sends through supabase.functions.invoke
CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"
CORS_ALLOW_METHODS = "GET, POST, OPTIONS"


# ---------------------------------------------------------------------------
# Application Factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    configure_observability(settings)

    # Initialize Sentry for error tracking
    _init_sentry(settings)

    app = FastAPI(
        title="Chef AI Usage API",
        description="Daily query quota and subscription entitlement checks",
        version="1.0.0",
    )

    # Store settings on app state for dependencies and middleware
    app.state.settings = settings

    _configure_cors(app, settings)
    _register_exception_handlers(app)
    _include_routers(app)
    _register_shutdown(app)

    instrument_app(app)

    return app


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            release=settings.render_git_commit,
            traces_sample_rate=0.1,
        )
        logger.info(
            "Sentry initialized for usage-api (release=%s)",
            settings.render_git_commit or "unknown",
        )


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Answer pre-flight requests and add CORS headers to every response.

    OPTIONS requests get an empty 200 before routing, so they never reach
    authentication.
    """

    def __init__(self, app, allow_origins: List[str]):
        super().__init__(app)
        self._allow_origins = allow_origins

    def _headers(self, request: Request) -> Dict[str, str]:
        headers = {
            "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
            "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
        }
        if "*" in self._allow_origins:
            headers["Access-Control-Allow-Origin"] = "*"
        else:
            origin = request.headers.get("origin")
            if origin in self._allow_origins:
                headers["Access-Control-Allow-Origin"] = origin
                headers["Vary"] = "Origin"
        return headers

    async def dispatch(self, request: Request, call_next):
        headers = self._headers(request)
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)

        response: Response = await call_next(request)
        response.headers.update(headers)
        return response


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the application."""
    app.add_middleware(CORSHeadersMiddleware, allow_origins=settings.allowed_origins)


def _register_exception_handlers(app: FastAPI) -> None:
    """Map errors raised while resolving dependencies to 500 {"error": ...}."""
    from api.errors import usage_service_error_handler

    app.add_exception_handler(UsageServiceError, usage_service_error_handler)


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import health_router, subscription_router, usage_router

    # Health router (no prefix - /health at root)
    app.include_router(health_router)

    # Usage router (/check-usage, /increment-usage)
    app.include_router(usage_router)

    # Subscription router (/check-subscription)
    app.include_router(subscription_router)


def _register_shutdown(app: FastAPI) -> None:
    """Register graceful shutdown handler."""

    @app.on_event("shutdown")
    async def shutdown_event():
        shutdown_observability()
        logger.info("usage-api shutdown complete")

