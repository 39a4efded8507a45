"""Builds a complete permission matrix for one account.

Fetches the menu catalog once, then each menu's grants independently.
A failed or empty per-menu lookup degrades to "nothing granted" for that
menu and never aborts the others; only a catalog failure is fatal.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping, Sequence

from console_access.application.interfaces.services import IGrantStore, IMenuCatalog
from console_access.domain.entities import (
    AccountId,
    Menu,
    MenuGrants,
    PermissionGrant,
    PermissionMatrix,
)
from console_access.domain.enums import PermissionKind
from console_access.domain.exceptions import CatalogUnavailableException
from console_access.shared.telemetry.logging import get_logger
from console_access.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    traced,
)

logger = get_logger(__name__)

DEFAULT_FETCH_CONCURRENCY = 8


def index_grants(
    menu_id: int, grants: Iterable[PermissionGrant]
) -> dict[PermissionKind, PermissionGrant]:
    """Key a menu's grants by kind. Later records for the same kind win."""
    by_kind: dict[PermissionKind, PermissionGrant] = {}
    for grant in grants:
        if grant.kind in by_kind:
            logger.debug(
                "Duplicate %s grant for menu %s; keeping the last one",
                grant.kind.label,
                menu_id,
            )
        by_kind[grant.kind] = grant
    return by_kind


def build_matrix(
    account_id: AccountId,
    menus: Sequence[Menu],
    grants_by_menu: Mapping[int, Iterable[PermissionGrant]],
) -> PermissionMatrix:
    """Sparse-to-dense fill pass.

    Every menu gets all four kinds. A kind with no matching record is a
    not-granted, never-persisted grant. Grants are re-stamped with the
    requested account and their menu so a store echoing other ids cannot
    leak into the matrix.
    """
    entries = []
    for menu in menus:
        found = index_grants(menu.id, grants_by_menu.get(menu.id, ()))
        slots = {
            kind: PermissionGrant(
                account_id=account_id,
                menu_id=menu.id,
                kind=kind,
                status=grant.status,
                persisted_id=grant.persisted_id,
            )
            for kind, grant in found.items()
        }
        entries.append(MenuGrants.from_grants(account_id, menu, slots))
    return PermissionMatrix(account_id, tuple(entries))


def unique_menus(menus: Iterable[Menu]) -> list[Menu]:
    """Drop repeated menu ids, keeping the first occurrence in catalog order."""
    seen: set[int] = set()
    result: list[Menu] = []
    for menu in menus:
        if menu.id in seen:
            logger.warning("Menu catalog listed menu %s more than once; ignoring repeat", menu.id)
            continue
        seen.add(menu.id)
        result.append(menu)
    return result


class MatrixInitializer:
    """Produce a dense PermissionMatrix from the menu catalog and grant store."""

    def __init__(
        self,
        menu_catalog: IMenuCatalog,
        grant_store: IGrantStore,
        *,
        concurrency: int = DEFAULT_FETCH_CONCURRENCY,
    ) -> None:
        self._catalog = menu_catalog
        self._store = grant_store
        self._concurrency = max(1, concurrency)

    @traced("permissions.initialize_matrix")
    async def initialize(self, account_id: AccountId) -> PermissionMatrix:
        """Build the full matrix for an account.

        Raises:
            CatalogUnavailableException: The menu list could not be loaded.
        """
        menus = unique_menus(await self._load_menus())
        semaphore = asyncio.Semaphore(self._concurrency)

        async def fetch(menu: Menu) -> list[PermissionGrant]:
            async with semaphore:
                return await self._load_grants(menu.id, account_id)

        results = await asyncio.gather(*(fetch(menu) for menu in menus))
        grants_by_menu = {menu.id: grants for menu, grants in zip(menus, results)}
        matrix = build_matrix(account_id, menus, grants_by_menu)
        add_span_attributes(
            **{"matrix.account_id": str(account_id), "matrix.menu_count": len(matrix)}
        )
        logger.info(
            "Loaded permission matrix for account %s (%d menus)", account_id, len(matrix)
        )
        return matrix

    async def _load_menus(self) -> list[Menu]:
        try:
            return list(await self._catalog.list_menus())
        except CatalogUnavailableException:
            raise
        except Exception as e:
            logger.error("Menu catalog lookup failed: %s", e)
            raise CatalogUnavailableException(str(e)) from e

    async def _load_grants(self, menu_id: int, account_id: AccountId) -> list[PermissionGrant]:
        """Fetch one menu's grants; any failure yields no grants (fail-closed)."""
        try:
            grants = list(await self._store.list_grants(menu_id, account_id))
        except Exception as e:
            logger.warning(
                "Grant lookup failed for menu %s, account %s; defaulting to not granted: %s",
                menu_id,
                account_id,
                e,
            )
            add_span_event(
                "permissions.grant_fetch_degraded",
                {"menu_id": menu_id, "error": type(e).__name__},
            )
            return []
        if not grants:
            logger.debug("No grants stored for menu %s, account %s", menu_id, account_id)
        return grants
