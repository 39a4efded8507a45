"""MatrixInitializer unit tests with mocked catalog and grant store."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from console_access.application.services.matrix_initializer import (
    MatrixInitializer,
    build_matrix,
    unique_menus,
)
from console_access.domain.entities import Menu, PermissionGrant
from console_access.domain.enums import PermissionKind
from console_access.domain.exceptions import CatalogUnavailableException, GrantFetchException


def _catalog(menus: list[Menu]) -> AsyncMock:
    catalog = AsyncMock()
    catalog.list_menus = AsyncMock(return_value=menus)
    return catalog


def _store(by_menu: dict) -> AsyncMock:
    """Grant store mock; a value that is an exception is raised for that menu."""

    async def list_grants(menu_id, account_id):
        value = by_menu.get(menu_id, [])
        if isinstance(value, BaseException):
            raise value
        return value

    store = AsyncMock()
    store.list_grants = AsyncMock(side_effect=list_grants)
    return store


def _statuses(matrix, menu_id):
    return [(g.status, g.persisted_id) for g in matrix.entry(menu_id)]


async def test_every_menu_has_all_four_kinds() -> None:
    menus = [Menu(1, "Users"), Menu(2, "Courses"), Menu(3, "Reports")]
    store = _store({
        1: [PermissionGrant(42, 1, PermissionKind.READ, True, "g-1")],
        2: [PermissionGrant(42, 2, k, True, f"g-2{k.code}") for k in PermissionKind],
    })
    matrix = await MatrixInitializer(_catalog(menus), store).initialize(42)

    assert matrix.menu_ids == [1, 2, 3]
    for entry in matrix:
        assert [g.kind for g in entry] == list(PermissionKind)
    assert matrix.entry(2).all_selected
    assert store.list_grants.await_count == 3


async def test_failed_lookup_defaults_menu_to_not_granted() -> None:
    menus = [Menu(1, "Users"), Menu(2, "Courses")]
    store = _store({
        1: GrantFetchException(1, 42, "status 500"),
        2: [PermissionGrant(42, 2, PermissionKind.UPDATE, True, "g-5")],
    })
    matrix = await MatrixInitializer(_catalog(menus), store).initialize(42)

    assert _statuses(matrix, 1) == [(False, None)] * 4
    assert matrix.grant(2, PermissionKind.UPDATE).persisted_id == "g-5"


async def test_unexpected_lookup_error_is_also_absorbed() -> None:
    store = _store({1: RuntimeError("boom")})
    matrix = await MatrixInitializer(_catalog([Menu(1, "Users")]), store).initialize(42)
    assert _statuses(matrix, 1) == [(False, None)] * 4


async def test_catalog_failure_is_fatal() -> None:
    catalog = AsyncMock()
    catalog.list_menus = AsyncMock(side_effect=RuntimeError("connection refused"))
    with pytest.raises(CatalogUnavailableException) as exc_info:
        await MatrixInitializer(catalog, _store({})).initialize(42)
    assert "connection refused" in exc_info.value.details["reason"]


async def test_catalog_unavailable_passes_through_unchanged() -> None:
    original = CatalogUnavailableException("GET /menus returned 503")
    catalog = AsyncMock()
    catalog.list_menus = AsyncMock(side_effect=original)
    with pytest.raises(CatalogUnavailableException) as exc_info:
        await MatrixInitializer(catalog, _store({})).initialize(42)
    assert exc_info.value is original


async def test_empty_catalog_gives_empty_matrix() -> None:
    store = _store({})
    matrix = await MatrixInitializer(_catalog([]), store).initialize(42)
    assert len(matrix) == 0
    store.list_grants.assert_not_awaited()


async def test_last_duplicate_wins_and_unknown_menus_are_restamped() -> None:
    store = _store({
        1: [
            PermissionGrant(42, 1, PermissionKind.READ, False, "old"),
            PermissionGrant(42, 1, PermissionKind.READ, True, "new"),
            # Store echoed a foreign menu/account; the matrix keeps its own ids.
            PermissionGrant(99, 7, PermissionKind.DELETE, True, "x"),
        ]
    })
    matrix = await MatrixInitializer(_catalog([Menu(1, "Users")]), store).initialize(42)

    read = matrix.grant(1, PermissionKind.READ)
    assert (read.status, read.persisted_id) == (True, "new")
    delete = matrix.grant(1, PermissionKind.DELETE)
    assert (delete.account_id, delete.menu_id) == (42, 1)


async def test_results_follow_catalog_order_not_completion_order() -> None:
    async def list_grants(menu_id, account_id):
        # Menu 1 answers last.
        await asyncio.sleep(0.02 if menu_id == 1 else 0)
        return [PermissionGrant(account_id, menu_id, PermissionKind.CREATE, True, f"g-{menu_id}")]

    store = AsyncMock()
    store.list_grants = AsyncMock(side_effect=list_grants)
    menus = [Menu(1, "Users"), Menu(2, "Courses"), Menu(3, "Reports")]
    matrix = await MatrixInitializer(_catalog(menus), store, concurrency=2).initialize(42)

    assert matrix.menu_ids == [1, 2, 3]
    assert [matrix.grant(m, PermissionKind.CREATE).persisted_id for m in (1, 2, 3)] == [
        "g-1",
        "g-2",
        "g-3",
    ]


async def test_concurrency_limit_is_respected() -> None:
    in_flight = 0
    peak = 0

    async def list_grants(menu_id, account_id):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return []

    store = AsyncMock()
    store.list_grants = AsyncMock(side_effect=list_grants)
    menus = [Menu(i, f"m{i}") for i in range(1, 7)]
    await MatrixInitializer(_catalog(menus), store, concurrency=2).initialize(42)
    assert peak == 2


def test_unique_menus_keeps_first_occurrence() -> None:
    menus = unique_menus([Menu(1, "Users"), Menu(2, "Courses"), Menu(1, "Users again")])
    assert [(m.id, m.name) for m in menus] == [(1, "Users"), (2, "Courses")]


def test_build_matrix_without_grants_is_dense() -> None:
    matrix = build_matrix(42, [Menu(1, "Users")], {})
    assert _statuses(matrix, 1) == [(False, None)] * 4


class TestAccount42Scenario:
    """Account 42 with menus Users and Courses and one stored Read grant on Users."""

    async def test_initial_matrix(self, account_42_menus, account_42_store) -> None:
        catalog = _catalog(account_42_menus)
        matrix = await MatrixInitializer(catalog, account_42_store).initialize(42)

        assert _statuses(matrix, 1) == [(False, None), (True, "g-9"), (False, None), (False, None)]
        assert _statuses(matrix, 2) == [(False, None)] * 4
        assert [m.name for m in matrix.menus] == ["Users", "Courses"]
