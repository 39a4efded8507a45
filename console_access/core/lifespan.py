"""Application lifespan: startup and shutdown.

Wiring only: shared console API client, logging, telemetry. The screen
store is created in create_app() so it exists even when the lifespan
does not run (ASGI test transports).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from console_access.core.config import get_settings
from console_access.shared.telemetry import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, shared console API client, telemetry (if enabled).
    Shutdown order: console API client close, telemetry shutdown.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    # One pooled client for every call to the console API.
    app.state.console_http = httpx.AsyncClient(
        base_url=settings.console_api_base_url,
        timeout=settings.console_api_timeout_seconds,
    )
    logger.info("Console API client ready (%s)", settings.console_api_base_url)

    if settings.telemetry_enabled:
        from console_access.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_logging()
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    if getattr(app.state, "console_http", None) is not None:
        await app.state.console_http.aclose()
        app.state.console_http = None
        logger.info("Console API client closed")

    from console_access.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
        logger.info("Telemetry shutdown complete")
