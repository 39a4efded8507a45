"""Shared utilities: datetime and id generators."""

from console_access.shared.utils.datetime import utc_now
from console_access.shared.utils.generators import generate_screen_id

__all__ = [
    "generate_screen_id",
    "utc_now",
]
