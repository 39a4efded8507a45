"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
See console_access.core.lifespan and console_access.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before importing or calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from console_access.api.v1 import api_router
from console_access.core.config import get_settings
from console_access.core.exception_handlers import register_exception_handlers
from console_access.core.lifespan import create_lifespan
from console_access.core.limiter import limiter
from console_access.core.screen_store import PermissionScreenStore
from console_access.middleware import RequestIDMiddleware, TimeoutMiddleware


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    app.state.screen_store = PermissionScreenStore(idle_ttl_seconds=settings.screen_idle_ttl_seconds)

    # Middleware: first added = innermost. Order seen by a request: timeout -> request ID -> CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
