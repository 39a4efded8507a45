"""Domain entities and aggregates.

Pure domain models; no transport or persistence concerns.
"""

from console_access.domain.entities.grant import AccountId, PermissionGrant, PersistedId
from console_access.domain.entities.matrix import MenuGrants, PermissionMatrix
from console_access.domain.entities.menu import Menu

__all__ = [
    "AccountId",
    "Menu",
    "MenuGrants",
    "PermissionGrant",
    "PermissionMatrix",
    "PersistedId",
]
