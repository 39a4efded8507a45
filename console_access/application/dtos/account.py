"""DTOs for the account directory (no dependency on transport)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AccountProfile:
    """Staff account read-model shown on a permission screen."""

    account_id: int | str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    role: str | None = None
    status: str | None = None

    @property
    def display_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts)

    @property
    def is_active(self) -> bool:
        return (self.status or "").upper() == "ACTIVE"
