"""Domain exceptions for console access management.

Defines domain-level exceptions for the permission matrix lifecycle.
These exceptions are independent of transport concerns. The presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class ConsoleAccessException(Exception):
    """Base exception for all console access errors.

    All custom exceptions inherit from this class to allow consistent
    error handling and logging. Presentation layer maps these to HTTP
    responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. menu_id, account_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body used by the HTTP layer."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(ConsoleAccessException):
    """Raised when input validation fails (e.g. malformed grant record)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(ConsoleAccessException):
    """Raised when a requested resource (menu entry, screen) is not found."""

    def __init__(self, resource_type: str, resource_id: Any) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'menu', 'permission_screen').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class CatalogUnavailableException(ConsoleAccessException):
    """Raised when the menu catalog cannot be loaded. Fatal to a permission screen."""

    def __init__(self, reason: str | None = None) -> None:
        details = {"reason": reason} if reason else {}
        super().__init__("Menu catalog is unavailable", "CATALOG_UNAVAILABLE", details)


class GrantFetchException(ConsoleAccessException):
    """Raised by a grant store when a per-menu lookup fails.

    Never surfaced to users: the matrix initializer absorbs it and
    defaults the menu's grants to not granted.
    """

    def __init__(self, menu_id: int, account_id: Any, reason: str | None = None) -> None:
        details: dict[str, Any] = {"menu_id": menu_id, "account_id": account_id}
        if reason:
            details["reason"] = reason
        super().__init__(
            f"Could not load grants for menu {menu_id}",
            "GRANT_FETCH_DEGRADED",
            details,
        )


class SaveRejectedException(ConsoleAccessException):
    """Raised when the bulk upsert fails (network, validation, authorization)."""

    def __init__(
        self,
        account_id: Any,
        reason: str | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize with the account and what the store reported.

        Args:
            account_id: Account whose matrix was being saved.
            reason: Optional human-readable cause.
            status_code: Upstream HTTP status, when the store answered.
        """
        details: dict[str, Any] = {"account_id": account_id}
        if reason:
            details["reason"] = reason
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__("Failed to save permissions", "SAVE_REJECTED", details)


class MatrixRefreshException(ConsoleAccessException):
    """Raised when permissions were saved but the matrix could not be reloaded afterwards."""

    def __init__(self, account_id: Any) -> None:
        super().__init__(
            "Permissions were saved but could not be reloaded; reload before saving again",
            "MATRIX_REFRESH_FAILED",
            {"account_id": account_id},
        )


class SaveInProgressException(ConsoleAccessException):
    """Raised when a save or edit is attempted while a save is in flight for the same screen."""

    def __init__(self, account_id: Any) -> None:
        super().__init__(
            "A save is already in progress for this account",
            "SAVE_IN_PROGRESS",
            {"account_id": account_id},
        )


class ScreenNotReadyException(ConsoleAccessException):
    """Raised when the matrix is read before initialization has completed."""

    def __init__(self, account_id: Any) -> None:
        super().__init__(
            "Permissions have not been loaded yet",
            "SCREEN_NOT_READY",
            {"account_id": account_id},
        )


class StaleMatrixException(ConsoleAccessException):
    """Raised when saving a matrix whose persisted ids are known to be out of date."""

    def __init__(self, account_id: Any) -> None:
        super().__init__(
            "Permissions must be reloaded before saving again",
            "STALE_MATRIX",
            {"account_id": account_id},
        )


class MatrixLoadingException(ConsoleAccessException):
    """Raised when a save or edit is attempted while the matrix is being (re)loaded."""

    def __init__(self, account_id: Any) -> None:
        super().__init__(
            "Permissions are being loaded for this account",
            "MATRIX_LOADING",
            {"account_id": account_id},
        )


class AuthenticationException(ConsoleAccessException):
    """Raised when a request carries no usable bearer token."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(ConsoleAccessException):
    """Raised when the caller is not allowed to act on a resource (e.g. another admin's screen)."""

    def __init__(self, resource: str | None = None, message: str = "Permission denied") -> None:
        details = {"resource": resource} if resource else {}
        super().__init__(message, "AUTHORIZATION_ERROR", details)
