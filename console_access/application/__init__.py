"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (menu catalog, grant store, account directory).
"""

from console_access.application.interfaces import (
    IAccountDirectory,
    IGrantStore,
    IMenuCatalog,
)
from console_access.application.services import BulkSaveCoordinator, MatrixInitializer
from console_access.application.use_cases import PermissionScreen

__all__ = [
    "BulkSaveCoordinator",
    "IAccountDirectory",
    "IGrantStore",
    "IMenuCatalog",
    "MatrixInitializer",
    "PermissionScreen",
]
