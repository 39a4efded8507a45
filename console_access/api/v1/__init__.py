"""API version 1."""

from console_access.api.v1.router import api_router

__all__ = ["api_router"]
