"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from console_access.domain.entities import (
    Menu,
    MenuGrants,
    PermissionGrant,
    PermissionMatrix,
)
from console_access.domain.enums import PermissionKind
from console_access.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    CatalogUnavailableException,
    ConsoleAccessException,
    GrantFetchException,
    MatrixLoadingException,
    MatrixRefreshException,
    ResourceNotFoundException,
    SaveInProgressException,
    SaveRejectedException,
    ScreenNotReadyException,
    StaleMatrixException,
    ValidationException,
)

__all__ = [
    # Entities
    "Menu",
    "MenuGrants",
    "PermissionGrant",
    "PermissionMatrix",
    # Enums
    "PermissionKind",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "CatalogUnavailableException",
    "ConsoleAccessException",
    "GrantFetchException",
    "MatrixLoadingException",
    "MatrixRefreshException",
    "ResourceNotFoundException",
    "SaveInProgressException",
    "SaveRejectedException",
    "ScreenNotReadyException",
    "StaleMatrixException",
    "ValidationException",
]
