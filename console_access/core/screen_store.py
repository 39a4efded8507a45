"""In-memory store for open permission screens.

Screens are keyed by a generated screen id and live on app.state. Each one
belongs to the bearer token that opened it: only the same token can read,
edit, save or close it. A screen is dropped when its UI navigates away, or
evicted once it has been idle longer than the configured TTL.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from console_access.application.use_cases.permission_screen import PermissionScreen
from console_access.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
)
from console_access.shared.utils.datetime import utc_now
from console_access.shared.utils.generators import generate_screen_id

logger = logging.getLogger(__name__)


def _fingerprint(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


@dataclass
class _OpenScreen:
    screen: PermissionScreen
    owner: str
    touched_at: datetime


class PermissionScreenStore:
    """Registry of open PermissionScreen instances."""

    def __init__(self, idle_ttl_seconds: int = 0) -> None:
        self._screens: dict[str, _OpenScreen] = {}
        self._idle_ttl = timedelta(seconds=idle_ttl_seconds) if idle_ttl_seconds > 0 else None

    def add(self, screen: PermissionScreen, owner_token: str) -> str:
        """Register a screen for the caller holding owner_token and return its new id."""
        self.sweep()
        screen_id = generate_screen_id()
        self._screens[screen_id] = _OpenScreen(screen, _fingerprint(owner_token), utc_now())
        return screen_id

    def get(self, screen_id: str, owner_token: str) -> PermissionScreen:
        """Return the screen and mark it as used.

        Raises:
            ResourceNotFoundException: unknown, closed or evicted screen.
            AuthorizationException: the screen was opened with another token.
        """
        entry = self._owned(screen_id, owner_token)
        if entry is None:
            raise ResourceNotFoundException("permission_screen", screen_id)
        entry.touched_at = utc_now()
        return entry.screen

    def discard(self, screen_id: str, owner_token: str) -> None:
        """Drop a screen and its matrix. No-op if already gone."""
        if self._owned(screen_id, owner_token) is not None:
            del self._screens[screen_id]

    def sweep(self, now: datetime | None = None) -> int:
        """Evict screens idle past the TTL; a screen mid-load or mid-save is kept."""
        if self._idle_ttl is None:
            return 0
        cutoff = (now or utc_now()) - self._idle_ttl
        expired = [
            screen_id
            for screen_id, entry in self._screens.items()
            if entry.touched_at < cutoff and not (entry.screen.saving or entry.screen.loading)
        ]
        for screen_id in expired:
            del self._screens[screen_id]
        if expired:
            logger.info("Evicted %d idle permission screens", len(expired))
        return len(expired)

    def _owned(self, screen_id: str, owner_token: str) -> _OpenScreen | None:
        entry = self._screens.get(screen_id)
        if entry is not None and not hmac.compare_digest(entry.owner, _fingerprint(owner_token)):
            raise AuthorizationException("permission_screen")
        return entry

    def __len__(self) -> int:
        return len(self._screens)
