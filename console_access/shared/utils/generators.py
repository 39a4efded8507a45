"""Identifier generation for permission screens."""

from cuid2 import cuid_wrapper

_next_screen_id = cuid_wrapper()


def generate_screen_id() -> str:
    """Return a new collision-resistant screen id (CUID2)."""
    return str(_next_screen_id())
