"""Permission matrix aggregate.

The complete, dense grant set for one account: one MenuGrants record per
catalog menu, each holding exactly four grants (one per PermissionKind).
Missing server data is represented as a not-granted, never-persisted grant,
never by omission. The aggregate is immutable; every edit returns a new
matrix so a held reference can never be partially updated.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace

from console_access.domain.entities.grant import AccountId, PermissionGrant
from console_access.domain.entities.menu import Menu
from console_access.domain.enums import PermissionKind
from console_access.domain.exceptions import (
    ResourceNotFoundException,
    ValidationException,
)


@dataclass(frozen=True)
class MenuGrants:
    """Fixed-size grant record for one menu, in PermissionKind order."""

    menu: Menu
    create: PermissionGrant
    read: PermissionGrant
    update: PermissionGrant
    delete: PermissionGrant

    def __post_init__(self) -> None:
        account_ids = set()
        for kind in PermissionKind:
            grant = getattr(self, kind.label)
            if not isinstance(grant, PermissionGrant) or grant.kind is not kind:
                raise ValidationException(
                    f"Slot '{kind.label}' must hold a {kind.label} grant", field=kind.label
                )
            if grant.menu_id != self.menu.id:
                raise ValidationException(
                    f"Grant for menu {grant.menu_id} placed under menu {self.menu.id}",
                    field="menu_id",
                )
            account_ids.add(grant.account_id)
        if len(account_ids) != 1:
            raise ValidationException("All grants of a menu must belong to one account", field="account_id")

    @classmethod
    def defaults(cls, account_id: AccountId, menu: Menu) -> "MenuGrants":
        """All four kinds not granted and never persisted."""
        return cls.from_grants(account_id, menu, {})

    @classmethod
    def from_grants(
        cls,
        account_id: AccountId,
        menu: Menu,
        grants: Mapping[PermissionKind, PermissionGrant],
    ) -> "MenuGrants":
        """Build a dense record, filling absent kinds with fail-closed defaults."""
        slots = {
            kind.label: grants.get(kind) or PermissionGrant.default(account_id, menu.id, kind)
            for kind in PermissionKind
        }
        return cls(menu=menu, **slots)

    @property
    def menu_id(self) -> int:
        return self.menu.id

    @property
    def account_id(self) -> AccountId:
        return self.create.account_id

    def grant(self, kind: PermissionKind) -> PermissionGrant:
        return getattr(self, PermissionKind(kind).label)

    def __iter__(self) -> Iterator[PermissionGrant]:
        for kind in PermissionKind:
            yield getattr(self, kind.label)

    @property
    def all_selected(self) -> bool:
        """True when every kind is granted. Computed on each access."""
        return all(grant.status for grant in self)

    def with_status(self, kind: PermissionKind, status: bool) -> "MenuGrants":
        kind = PermissionKind(kind)
        return replace(self, **{kind.label: self.grant(kind).with_status(status)})

    def with_all(self, status: bool) -> "MenuGrants":
        return replace(
            self,
            **{grant.kind.label: grant.with_status(status) for grant in self},
        )


@dataclass(frozen=True)
class PermissionMatrix:
    """Dense per-account view over all menus, in catalog order."""

    account_id: AccountId
    entries: tuple[MenuGrants, ...] = ()
    _index: dict[int, int] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        entries = tuple(self.entries)
        object.__setattr__(self, "entries", entries)
        index: dict[int, int] = {}
        for position, entry in enumerate(entries):
            if entry.menu_id in index:
                raise ValidationException(
                    f"Duplicate menu {entry.menu_id} in permission matrix", field="menu_id"
                )
            if entry.account_id != self.account_id:
                raise ValidationException(
                    f"Menu {entry.menu_id} holds grants for another account", field="account_id"
                )
            index[entry.menu_id] = position
        object.__setattr__(self, "_index", index)

    @property
    def menu_ids(self) -> list[int]:
        return [entry.menu_id for entry in self.entries]

    @property
    def menus(self) -> list[Menu]:
        return [entry.menu for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[MenuGrants]:
        return iter(self.entries)

    def __contains__(self, menu_id: object) -> bool:
        return menu_id in self._index

    def entry(self, menu_id: int) -> MenuGrants:
        """Return the record for a menu. Raises ResourceNotFoundException if absent."""
        position = self._index.get(menu_id)
        if position is None:
            raise ResourceNotFoundException("menu", menu_id)
        return self.entries[position]

    def grant(self, menu_id: int, kind: PermissionKind) -> PermissionGrant:
        return self.entry(menu_id).grant(kind)

    def grants(self) -> Iterator[PermissionGrant]:
        """Iterate every grant, menu by menu, in kind order."""
        for entry in self.entries:
            yield from entry

    def with_entry(self, entry: MenuGrants) -> "PermissionMatrix":
        """Return a matrix with one menu's record replaced."""
        position = self._index.get(entry.menu_id)
        if position is None:
            raise ResourceNotFoundException("menu", entry.menu_id)
        entries = list(self.entries)
        entries[position] = entry
        return PermissionMatrix(self.account_id, tuple(entries))

    def with_entries(self, entries: Iterable[MenuGrants]) -> "PermissionMatrix":
        return PermissionMatrix(self.account_id, tuple(entries))
