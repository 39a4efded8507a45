"""Collaborator interfaces (ports) for the application layer.

Protocols define the contracts the permission services rely on (DIP).
Infrastructure implements them against the console API.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from console_access.application.dtos.account import AccountProfile
    from console_access.application.dtos.grant_record import MenuGrantRecord
    from console_access.domain.entities import AccountId, Menu, PermissionGrant


class IMenuCatalog(Protocol):
    """Protocol for the ordered list of manageable menus."""

    async def list_menus(self) -> list[Menu]:
        """Return all menus. Raises CatalogUnavailableException when the catalog cannot be read."""


class IGrantStore(Protocol):
    """Protocol for grant lookup and bulk persistence."""

    async def list_grants(self, menu_id: int, account_id: AccountId) -> list[PermissionGrant]:
        """Return zero or more grants for the pair.

        Absence of a record for a kind means "not granted", not an error.
        """

    async def bulk_upsert(
        self,
        account_id: AccountId,
        records: Sequence[MenuGrantRecord],
    ) -> list[PermissionGrant] | None:
        """Create-or-update every record as one logical unit.

        Returns the stored grants when the store reports assigned ids,
        otherwise None. Raises SaveRejectedException when the batch fails.
        """


class IAccountDirectory(Protocol):
    """Protocol for staff account profiles."""

    async def get_profile(self, account_id: AccountId) -> AccountProfile | None:
        """Return the profile, or None when it cannot be loaded."""
