"""Permission grant domain entity.

The atomic unit of access control: whether one account may perform one
kind of action on one menu. Immutable; edits produce a new grant.
"""

from dataclasses import dataclass, replace

from console_access.domain.enums import PermissionKind
from console_access.domain.exceptions import ValidationException

AccountId = int | str
PersistedId = int | str


@dataclass(frozen=True)
class PermissionGrant:
    """One (account, menu, kind) grant.

    persisted_id is assigned by the grant store once the grant has been
    saved at least once. Falsy ids (0, "") mean "never persisted" and are
    normalized to None on construction.
    """

    account_id: AccountId
    menu_id: int
    kind: PermissionKind
    status: bool = False
    persisted_id: PersistedId | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, PermissionKind):
            raise ValidationException("Grant kind must be a PermissionKind", field="kind")
        if not self.persisted_id:
            object.__setattr__(self, "persisted_id", None)
        object.__setattr__(self, "status", bool(self.status))

    @classmethod
    def default(
        cls, account_id: AccountId, menu_id: int, kind: PermissionKind
    ) -> "PermissionGrant":
        """Fail-closed placeholder: not granted, never persisted."""
        return cls(account_id=account_id, menu_id=menu_id, kind=kind)

    @property
    def is_persisted(self) -> bool:
        return self.persisted_id is not None

    def with_status(self, status: bool) -> "PermissionGrant":
        """Return a copy with the given status; persisted_id is kept."""
        if self.status == bool(status):
            return self
        return replace(self, status=bool(status))

    def toggled(self) -> "PermissionGrant":
        return replace(self, status=not self.status)
