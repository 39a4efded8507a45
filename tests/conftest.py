"""Pytest configuration and fixtures for console-access.

Sets CONSOLE_API_BASE_URL before the app is imported so settings validate
without a .env file. API tests go through ASGITransport, which does not run
the lifespan, so they replace get_collaborators with in-memory doubles.
"""

import os

os.environ.setdefault("CONSOLE_API_BASE_URL", "http://console.test/api")

from collections.abc import Iterable, Sequence  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from console_access.application.dtos.account import AccountProfile  # noqa: E402
from console_access.application.dtos.grant_record import MenuGrantRecord  # noqa: E402
from console_access.core.config import get_settings  # noqa: E402
from console_access.domain.entities import AccountId, Menu, PermissionGrant  # noqa: E402
from console_access.domain.enums import PermissionKind  # noqa: E402

get_settings.cache_clear()

from console_access.api.v1.dependencies import (  # noqa: E402
    ScreenCollaborators,
    get_collaborators,
)
from console_access.main import app  # noqa: E402

ADMIN_TOKEN = "admin-token"


class StaticMenuCatalog:
    """Menu catalog double returning a fixed list."""

    def __init__(self, menus: Iterable[Menu]) -> None:
        self.menus = list(menus)
        self.calls = 0

    async def list_menus(self) -> list[Menu]:
        self.calls += 1
        return list(self.menus)


class InMemoryGrantStore:
    """Grant store double keyed by (menu_id, account_id).

    bulk_upsert assigns ids to new grants ("new-1", "new-2", ...) and
    replaces the stored rows; it reports nothing back, so callers reload.
    """

    def __init__(self, grants: Iterable[PermissionGrant] = ()) -> None:
        self.rows: dict[tuple[int, AccountId], list[PermissionGrant]] = {}
        for grant in grants:
            self.rows.setdefault((grant.menu_id, grant.account_id), []).append(grant)
        self.upserts: list[list[MenuGrantRecord]] = []
        self._next_id = 0

    async def list_grants(self, menu_id: int, account_id: AccountId) -> list[PermissionGrant]:
        return list(self.rows.get((menu_id, account_id), []))

    async def bulk_upsert(
        self, account_id: AccountId, records: Sequence[MenuGrantRecord]
    ) -> list[PermissionGrant] | None:
        self.upserts.append(list(records))
        for record in records:
            stored = []
            for descriptor in record.grants:
                persisted_id = descriptor.persisted_id
                if descriptor.is_new:
                    self._next_id += 1
                    persisted_id = f"new-{self._next_id}"
                stored.append(
                    PermissionGrant(
                        account_id=account_id,
                        menu_id=descriptor.menu_id,
                        kind=PermissionKind(descriptor.permission_code),
                        status=descriptor.status,
                        persisted_id=persisted_id,
                    )
                )
            self.rows[(record.menu_id, account_id)] = stored
        return None


class StaticAccountDirectory:
    def __init__(self, profile: AccountProfile | None) -> None:
        self.profile = profile

    async def get_profile(self, account_id: AccountId) -> AccountProfile | None:
        return self.profile


@pytest.fixture
def account_42_menus() -> list[Menu]:
    return [Menu(id=1, name="Users"), Menu(id=2, name="Courses")]


@pytest.fixture
def account_42_store() -> InMemoryGrantStore:
    """One stored grant: menu 1, Read, granted, id "g-9"."""
    return InMemoryGrantStore(
        [PermissionGrant(42, 1, PermissionKind.READ, status=True, persisted_id="g-9")]
    )


@pytest.fixture
def collaborators(
    account_42_menus: list[Menu], account_42_store: InMemoryGrantStore
) -> ScreenCollaborators:
    return ScreenCollaborators(
        menu_catalog=StaticMenuCatalog(account_42_menus),
        grant_store=account_42_store,
        account_directory=StaticAccountDirectory(
            AccountProfile(
                account_id=42,
                first_name="Ada",
                last_name="Lovelace",
                email="ada@example.com",
                role="ADMIN",
                status="ACTIVE",
            )
        ),
    )


@pytest.fixture
async def client(collaborators: ScreenCollaborators) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with in-memory collaborators.

    Every request carries ADMIN_TOKEN as its bearer token.
    """
    app.dependency_overrides[get_collaborators] = lambda: collaborators
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Authorization": f"Bearer {ADMIN_TOKEN}"},
    ) as ac:
        yield ac
    app.dependency_overrides.pop(get_collaborators, None)
