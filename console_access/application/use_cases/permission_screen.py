"""Permission screen: the owner of one account's live permission matrix.

A screen is opened for one account, loads the matrix (and the account's
profile for display), applies local edits, and saves the whole matrix.
It enforces the ordering and mutual-exclusion rules:

- nothing reads or edits the matrix before it has been loaded;
- loading and saving never overlap: at most one of them runs at a time,
  and edits are refused while either runs;
- a successful save replaces the matrix wholesale, a failed one leaves it
  exactly as it was;
- after a save whose reload failed, the matrix carries placeholder ids for
  grants the store already created, so saving is refused until reload().
"""

from __future__ import annotations

import asyncio
from datetime import datetime

from console_access.application.dtos.account import AccountProfile
from console_access.application.interfaces.services import IAccountDirectory
from console_access.application.services import matrix_mutator
from console_access.application.services.bulk_save_coordinator import BulkSaveCoordinator
from console_access.application.services.matrix_initializer import MatrixInitializer
from console_access.domain.entities import AccountId, PermissionMatrix
from console_access.domain.enums import PermissionKind
from console_access.domain.exceptions import (
    CatalogUnavailableException,
    MatrixLoadingException,
    MatrixRefreshException,
    SaveInProgressException,
    SaveRejectedException,
    ScreenNotReadyException,
    StaleMatrixException,
)
from console_access.shared.telemetry.logging import get_logger
from console_access.shared.utils.datetime import utc_now

logger = get_logger(__name__)

MSG_SAVED = "All permissions saved successfully."
MSG_SAVE_FAILED = "Failed to save permissions."
MSG_RELOAD_FAILED = "Permissions were saved but could not be reloaded. Reload before saving again."
MSG_MENUS_FAILED = "Failed to load menus."
MSG_PROFILE_FAILED = "Failed to load account details."


class PermissionScreen:
    """One open permission-editing session for one account."""

    def __init__(
        self,
        account_id: AccountId,
        initializer: MatrixInitializer,
        coordinator: BulkSaveCoordinator,
        account_directory: IAccountDirectory | None = None,
    ) -> None:
        self.account_id = account_id
        self._initializer = initializer
        self._coordinator = coordinator
        self._directory = account_directory
        self._matrix: PermissionMatrix | None = None
        # Held by reload() and save(); _busy names the holder.
        self._lock = asyncio.Lock()
        self._busy: str | None = None
        self.profile: AccountProfile | None = None
        self.message: str | None = None
        self.stale = False
        self.opened_at: datetime = utc_now()
        self.saved_at: datetime | None = None

    @property
    def matrix(self) -> PermissionMatrix:
        """The current matrix. Raises ScreenNotReadyException before open()."""
        if self._matrix is None:
            raise ScreenNotReadyException(self.account_id)
        return self._matrix

    @property
    def is_ready(self) -> bool:
        return self._matrix is not None

    @property
    def saving(self) -> bool:
        return self._busy == "save"

    @property
    def loading(self) -> bool:
        return self._busy == "load"

    async def open(self) -> PermissionMatrix:
        """Load the account profile and the full matrix.

        A profile failure only sets the screen message; a catalog failure
        propagates as CatalogUnavailableException.
        """
        if self._directory is not None:
            await self._load_profile()
        return await self.reload()

    async def reload(self) -> PermissionMatrix:
        """(Re)build the matrix from the store, discarding unsaved edits.

        Raises:
            SaveInProgressException / MatrixLoadingException: the screen is busy.
            CatalogUnavailableException: the menu list could not be loaded.
        """
        self._ensure_idle()
        async with self._lock:
            self._busy = "load"
            try:
                matrix = await self._initializer.initialize(self.account_id)
            except CatalogUnavailableException:
                self.message = MSG_MENUS_FAILED
                raise
            finally:
                self._busy = None
            self._matrix = matrix
            self.stale = False
            return matrix

    async def _load_profile(self) -> None:
        try:
            self.profile = await self._directory.get_profile(self.account_id)
        except Exception as e:
            logger.warning("Could not load profile for account %s: %s", self.account_id, e)
            self.profile = None
        if self.profile is None:
            self.message = MSG_PROFILE_FAILED

    def _ensure_idle(self) -> None:
        if self.loading:
            raise MatrixLoadingException(self.account_id)
        if self._lock.locked():
            raise SaveInProgressException(self.account_id)

    def _edit(self, matrix: PermissionMatrix) -> PermissionMatrix:
        self._matrix = matrix
        return matrix

    # Local edits

    def toggle_kind(self, menu_id: int, kind: PermissionKind) -> PermissionMatrix:
        self._ensure_idle()
        return self._edit(matrix_mutator.toggle_kind(self.matrix, menu_id, kind))

    def set_kind(self, menu_id: int, kind: PermissionKind, status: bool) -> PermissionMatrix:
        self._ensure_idle()
        return self._edit(matrix_mutator.set_kind(self.matrix, menu_id, kind, status))

    def toggle_all_kinds_for_menu(self, menu_id: int) -> PermissionMatrix:
        self._ensure_idle()
        return self._edit(matrix_mutator.toggle_all_kinds_for_menu(self.matrix, menu_id))

    def toggle_all_menus(self) -> PermissionMatrix:
        self._ensure_idle()
        return self._edit(matrix_mutator.toggle_all_menus(self.matrix))

    def is_menu_fully_selected(self, menu_id: int) -> bool:
        return matrix_mutator.is_menu_fully_selected(self.matrix, menu_id)

    def is_matrix_fully_selected(self) -> bool:
        return matrix_mutator.is_matrix_fully_selected(self.matrix)

    # Persistence

    async def save(self) -> PermissionMatrix:
        """Persist the whole matrix; on success swap in the refreshed copy.

        Raises:
            ScreenNotReadyException: open() has not completed.
            SaveInProgressException: another save is running.
            MatrixLoadingException: a reload is running.
            StaleMatrixException: a previous reload failed; call reload() first.
            SaveRejectedException: the store rejected the batch (matrix unchanged).
            MatrixRefreshException: saved, but the refreshed matrix could not be loaded.
        """
        self._ensure_idle()
        matrix = self.matrix
        if self.stale:
            raise StaleMatrixException(self.account_id)
        async with self._lock:
            self._busy = "save"
            try:
                refreshed = await self._coordinator.save(matrix)
            except SaveRejectedException:
                self.message = MSG_SAVE_FAILED
                raise
            except MatrixRefreshException:
                self.stale = True
                self.message = MSG_RELOAD_FAILED
                raise
            finally:
                self._busy = None
            self._matrix = refreshed
            self.saved_at = utc_now()
            self.message = MSG_SAVED
            logger.info("Permissions saved for account %s", self.account_id)
            return refreshed
