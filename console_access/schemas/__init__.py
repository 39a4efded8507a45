"""Pydantic request/response schemas for the API."""

from console_access.schemas.health import HealthResponse
from console_access.schemas.permission_screen import (
    OpenScreenRequest,
    ScreenView,
    SetGrantRequest,
    ToggleKindRequest,
    build_screen_view,
)

__all__ = [
    "HealthResponse",
    "OpenScreenRequest",
    "ScreenView",
    "SetGrantRequest",
    "ToggleKindRequest",
    "build_screen_view",
]
