"""Persists a whole permission matrix in one bulk upsert.

The unit of persistence is always the full matrix of one account. On
success a fresh matrix is produced (server-assigned ids absorbed); on
failure the caller keeps its matrix untouched and gets SaveRejectedException.
"""

from __future__ import annotations

from collections import defaultdict

from console_access.application.dtos.grant_record import (
    NOT_CREATED_ID,
    GrantDescriptor,
    MenuGrantRecord,
)
from console_access.application.interfaces.services import IGrantStore
from console_access.application.services.matrix_initializer import (
    MatrixInitializer,
    build_matrix,
)
from console_access.domain.entities import PermissionGrant, PermissionMatrix
from console_access.domain.exceptions import (
    ConsoleAccessException,
    MatrixRefreshException,
    SaveRejectedException,
)
from console_access.shared.telemetry.logging import get_logger
from console_access.shared.telemetry.tracing import add_span_event, traced

logger = get_logger(__name__)


def serialize(matrix: PermissionMatrix) -> list[MenuGrantRecord]:
    """Serialize every menu of the matrix into menu-scoped grant records.

    Each record carries four descriptors in kind order. Grants never
    persisted are sent with NOT_CREATED_ID so the store creates them.
    """
    return [
        MenuGrantRecord(
            menu_id=entry.menu_id,
            grants=tuple(
                GrantDescriptor(
                    persisted_id=grant.persisted_id or NOT_CREATED_ID,
                    account_id=matrix.account_id,
                    menu_id=entry.menu_id,
                    permission_code=grant.kind.code,
                    status=grant.status,
                )
                for grant in entry
            ),
        )
        for entry in matrix
    ]


def reconcile_from_response(
    matrix: PermissionMatrix, stored: list[PermissionGrant] | None
) -> PermissionMatrix | None:
    """Rebuild the matrix from the store's upsert response.

    Returns None unless the response holds a persisted grant for every
    (menu, kind) of the matrix; callers then fall back to a full reload.
    """
    if not stored:
        return None
    # Unpersisted echoes are dropped so they cannot shadow a persisted row.
    grants_by_menu: dict[int, list[PermissionGrant]] = defaultdict(list)
    for grant in stored:
        if grant.is_persisted:
            grants_by_menu[grant.menu_id].append(grant)
    for entry in matrix:
        returned = {g.kind for g in grants_by_menu.get(entry.menu_id, ())}
        if any(grant.kind not in returned for grant in entry):
            return None
    return build_matrix(matrix.account_id, matrix.menus, grants_by_menu)


class BulkSaveCoordinator:
    """Serialize, submit, and reconcile a permission matrix."""

    def __init__(self, grant_store: IGrantStore, initializer: MatrixInitializer) -> None:
        self._store = grant_store
        self._initializer = initializer

    @traced("permissions.save_matrix")
    async def save(self, matrix: PermissionMatrix) -> PermissionMatrix:
        """Persist the matrix and return a refreshed copy with authoritative ids.

        The given matrix is never modified.

        Raises:
            SaveRejectedException: The store rejected or failed the batch.
            MatrixRefreshException: The batch was stored but reloading failed.
        """
        records = serialize(matrix)
        created = sum(1 for record in records for g in record.grants if g.is_new)
        logger.info(
            "Saving permissions for account %s: %d menus, %d new grants",
            matrix.account_id,
            len(records),
            created,
        )
        try:
            stored = await self._store.bulk_upsert(matrix.account_id, records)
        except SaveRejectedException:
            logger.warning("Bulk upsert rejected for account %s", matrix.account_id)
            raise
        except Exception as e:
            logger.error("Bulk upsert failed for account %s: %s", matrix.account_id, e)
            raise SaveRejectedException(matrix.account_id, reason=str(e)) from e

        reconciled = reconcile_from_response(matrix, stored)
        if reconciled is not None:
            add_span_event("permissions.reconciled_from_response")
            return reconciled

        try:
            return await self._initializer.initialize(matrix.account_id)
        except ConsoleAccessException as e:
            logger.error(
                "Saved permissions for account %s but reload failed: %s",
                matrix.account_id,
                e.message,
            )
            raise MatrixRefreshException(matrix.account_id) from e
