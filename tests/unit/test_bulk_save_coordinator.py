"""BulkSaveCoordinator unit tests: serialization, failure atomicity, refresh."""

from unittest.mock import AsyncMock

import pytest

from console_access.application.dtos.grant_record import NOT_CREATED_ID
from console_access.application.services import matrix_mutator
from console_access.application.services.bulk_save_coordinator import (
    BulkSaveCoordinator,
    reconcile_from_response,
    serialize,
)
from console_access.application.services.matrix_initializer import MatrixInitializer, build_matrix
from console_access.domain.entities import Menu, PermissionGrant
from console_access.domain.enums import PermissionKind
from console_access.domain.exceptions import (
    CatalogUnavailableException,
    MatrixRefreshException,
    SaveRejectedException,
)

from tests.conftest import InMemoryGrantStore, StaticMenuCatalog


def _matrix_42():
    menus = [Menu(1, "Users"), Menu(2, "Courses")]
    stored = {1: [PermissionGrant(42, 1, PermissionKind.READ, True, "g-9")]}
    return build_matrix(42, menus, stored)


class TestSerialize:
    def test_account_42_edited_matrix(self) -> None:
        matrix = matrix_mutator.toggle_kind(_matrix_42(), 1, PermissionKind.CREATE)
        records = serialize(matrix)

        assert [r.menu_id for r in records] == [1, 2]
        descriptors = [d for r in records for d in r.grants]
        assert len(descriptors) == 8
        assert all(d.account_id == 42 for d in descriptors)
        assert [d.permission_code for d in records[0].grants] == [1, 2, 3, 4]

        read = records[0].grants[1]
        assert (read.persisted_id, read.status) == ("g-9", True)
        others = [d for d in descriptors if d is not read]
        assert all(d.persisted_id == NOT_CREATED_ID for d in others)
        assert records[0].grants[0].status is True

    def test_menu_id_travels_with_every_descriptor(self) -> None:
        records = serialize(_matrix_42())
        assert all(d.menu_id == r.menu_id for r in records for d in r.grants)


class TestSave:
    async def test_failure_leaves_matrix_untouched(self) -> None:
        store = AsyncMock()
        store.bulk_upsert = AsyncMock(side_effect=SaveRejectedException(42, status_code=500))
        initializer = AsyncMock()
        matrix = matrix_mutator.toggle_kind(_matrix_42(), 2, PermissionKind.DELETE)
        snapshot = list(matrix.grants())

        with pytest.raises(SaveRejectedException):
            await BulkSaveCoordinator(store, initializer).save(matrix)

        assert list(matrix.grants()) == snapshot
        initializer.initialize.assert_not_awaited()

    async def test_unexpected_store_error_becomes_save_rejected(self) -> None:
        store = AsyncMock()
        store.bulk_upsert = AsyncMock(side_effect=ConnectionError("reset by peer"))
        with pytest.raises(SaveRejectedException) as exc_info:
            await BulkSaveCoordinator(store, AsyncMock()).save(_matrix_42())
        assert exc_info.value.details["reason"] == "reset by peer"

    async def test_success_reloads_with_assigned_ids(self, account_42_menus, account_42_store) -> None:
        initializer = MatrixInitializer(StaticMenuCatalog(account_42_menus), account_42_store)
        matrix = await initializer.initialize(42)
        matrix = matrix_mutator.toggle_kind(matrix, 1, PermissionKind.CREATE)
        matrix = matrix_mutator.toggle_all_kinds_for_menu(matrix, 2)

        refreshed = await BulkSaveCoordinator(account_42_store, initializer).save(matrix)

        assert len(account_42_store.upserts) == 1
        saved_true = [g for g in refreshed.grants() if g.status]
        assert len(saved_true) == 6
        assert all(g.persisted_id is not None for g in saved_true)
        assert refreshed.grant(1, PermissionKind.READ).persisted_id == "g-9"
        assert matrix.grant(1, PermissionKind.CREATE).persisted_id is None

    async def test_refresh_failure_raises_matrix_refresh(self) -> None:
        store = AsyncMock()
        store.bulk_upsert = AsyncMock(return_value=None)
        initializer = AsyncMock()
        initializer.initialize = AsyncMock(side_effect=CatalogUnavailableException("down"))

        with pytest.raises(MatrixRefreshException):
            await BulkSaveCoordinator(store, initializer).save(_matrix_42())
        store.bulk_upsert.assert_awaited_once()

    async def test_complete_response_skips_reload(self) -> None:
        matrix = _matrix_42()
        stored = [
            PermissionGrant(42, entry.menu_id, grant.kind, grant.status, f"s-{entry.menu_id}-{grant.kind.code}")
            for entry in matrix
            for grant in entry
        ]
        store = AsyncMock()
        store.bulk_upsert = AsyncMock(return_value=stored)
        initializer = AsyncMock()

        refreshed = await BulkSaveCoordinator(store, initializer).save(matrix)

        initializer.initialize.assert_not_awaited()
        assert refreshed.grant(2, PermissionKind.UPDATE).persisted_id == "s-2-3"
        assert all(g.is_persisted for g in refreshed.grants())


class TestReconcileFromResponse:
    def test_partial_response_is_ignored(self) -> None:
        stored = [PermissionGrant(42, 1, PermissionKind.READ, True, "g-9")]
        assert reconcile_from_response(_matrix_42(), stored) is None

    def test_unpersisted_rows_do_not_count(self) -> None:
        matrix = _matrix_42()
        stored = [PermissionGrant(42, g.menu_id, g.kind, g.status, None) for g in matrix.grants()]
        assert reconcile_from_response(matrix, stored) is None

    def test_empty_response(self) -> None:
        assert reconcile_from_response(_matrix_42(), None) is None
        assert reconcile_from_response(_matrix_42(), []) is None

    def test_unpersisted_echo_does_not_shadow_persisted_row(self) -> None:
        matrix = _matrix_42()
        stored = [
            PermissionGrant(42, g.menu_id, g.kind, g.status, f"s-{g.menu_id}-{g.kind.code}")
            for g in matrix.grants()
        ]
        stored.append(PermissionGrant(42, 1, PermissionKind.READ, True, None))

        reconciled = reconcile_from_response(matrix, stored)

        assert reconciled is not None
        assert reconciled.grant(1, PermissionKind.READ).persisted_id == "s-1-2"
        assert all(g.is_persisted for g in reconciled.grants())
