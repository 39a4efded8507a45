"""Core: config and application bootstrap (lifespan, exception handlers, rate limiting, screen store)."""

from console_access.core.config import get_settings

__all__ = ["get_settings"]
