"""Domain enumerations for console access management.

Enums represent fixed sets of domain values (e.g. the four grantable actions).
"""

from enum import Enum


class PermissionKind(int, Enum):
    """Action a grant covers on a menu.

    The integer value is the code the console API uses on the wire
    (``permissionId``). The mapping is system-wide and not configurable.
    Declaration order is the fixed order of a menu's grant record.
    """

    CREATE = 1
    READ = 2
    UPDATE = 3
    DELETE = 4

    @property
    def code(self) -> int:
        """Wire-level numeric code for this kind."""
        return self.value

    @property
    def label(self) -> str:
        """Lowercase name used by the HTTP API (e.g. 'create')."""
        return self.name.lower()

    @classmethod
    def codes(cls) -> list[int]:
        """Return all wire codes in record order."""
        return [kind.value for kind in cls]

    @classmethod
    def from_code(cls, code: object) -> "PermissionKind | None":
        """Return the kind for a wire code, or None when the code is unknown.

        Args:
            code: Value read from the wire (int, or a numeric string).

        Returns:
            Matching PermissionKind, or None.
        """
        try:
            return cls(int(code))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None

    @classmethod
    def from_label(cls, label: str) -> "PermissionKind":
        """Return the kind for a lowercase label. Raises ValueError if unknown."""
        try:
            return cls[label.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown permission kind: {label!r}") from None
