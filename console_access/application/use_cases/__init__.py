"""Use cases: permission screen lifecycle."""

from console_access.application.use_cases.permission_screen import PermissionScreen

__all__ = ["PermissionScreen"]
