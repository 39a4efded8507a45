"""Menu domain entity.

A manageable resource of the admin console, the unit a grant is scoped to.
Lifecycle is owned by the menu catalog; read-only here.
"""

from dataclasses import dataclass

from console_access.domain.exceptions import ValidationException


@dataclass(frozen=True)
class Menu:
    """Menu as listed by the catalog: stable integer id plus display name."""

    id: int
    name: str

    def __post_init__(self) -> None:
        # bool is an int subclass; reject it explicitly.
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise ValidationException("Menu id must be an integer", field="id")
        if self.name is None:
            object.__setattr__(self, "name", "")
        elif not isinstance(self.name, str):
            object.__setattr__(self, "name", str(self.name))
