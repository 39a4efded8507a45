"""DTOs for the bulk upsert payload (serialized permission matrix)."""

from dataclasses import dataclass

# Persisted id sent for a grant the store has never created.
NOT_CREATED_ID = 0


@dataclass(frozen=True)
class GrantDescriptor:
    """One grant as submitted to the store.

    persisted_id is NOT_CREATED_ID when the grant exists only in memory;
    the store creates it, otherwise updates the record with that id.
    """

    persisted_id: int | str
    account_id: int | str
    menu_id: int
    permission_code: int
    status: bool

    @property
    def is_new(self) -> bool:
        return self.persisted_id == NOT_CREATED_ID


@dataclass(frozen=True)
class MenuGrantRecord:
    """Menu-scoped record: the four grant descriptors of one menu, in kind order."""

    menu_id: int
    grants: tuple[GrantDescriptor, ...]
