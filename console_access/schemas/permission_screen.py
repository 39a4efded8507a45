"""Permission screen API schemas.

Requests accept the permission kind as its lowercase name
(create, read, update, delete); views report both the name and the wire code.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from console_access.application.dtos.account import AccountProfile
from console_access.application.use_cases.permission_screen import PermissionScreen
from console_access.domain.entities import MenuGrants, PermissionGrant
from console_access.domain.enums import PermissionKind


class OpenScreenRequest(BaseModel):
    """Request body for opening a permission screen."""

    account_id: int | str = Field(..., description="Account whose permissions are edited")

    @field_validator("account_id")
    @classmethod
    def account_id_not_blank(cls, v: int | str) -> int | str:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("account_id must not be blank")
        return v


class ToggleKindRequest(BaseModel):
    """Request body for flipping one checkbox."""

    menu_id: int
    kind: PermissionKind

    @field_validator("kind", mode="before")
    @classmethod
    def parse_kind(cls, v: object) -> object:
        if isinstance(v, str):
            return PermissionKind.from_label(v)
        return v


class SetGrantRequest(ToggleKindRequest):
    """Request body for setting one checkbox to an explicit value."""

    status: bool


class GrantView(BaseModel):
    kind: str
    code: int
    status: bool
    persisted_id: int | str | None = None

    @classmethod
    def from_grant(cls, grant: PermissionGrant) -> GrantView:
        return cls(
            kind=grant.kind.label,
            code=grant.kind.code,
            status=grant.status,
            persisted_id=grant.persisted_id,
        )


class MenuView(BaseModel):
    menu_id: int
    name: str
    all_selected: bool
    grants: list[GrantView]

    @classmethod
    def from_entry(cls, entry: MenuGrants) -> MenuView:
        return cls(
            menu_id=entry.menu_id,
            name=entry.menu.name,
            all_selected=entry.all_selected,
            grants=[GrantView.from_grant(g) for g in entry],
        )


class ProfileView(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    display_name: str = ""
    email: str | None = None
    role: str | None = None
    status: str | None = None

    @classmethod
    def from_profile(cls, profile: AccountProfile) -> ProfileView:
        return cls(
            first_name=profile.first_name,
            last_name=profile.last_name,
            display_name=profile.display_name,
            email=profile.email,
            role=profile.role,
            status=profile.status,
        )


class ScreenView(BaseModel):
    """Full state of one permission screen, as rendered by the console UI."""

    screen_id: str
    account_id: int | str
    profile: ProfileView | None = None
    message: str | None = None
    saving: bool = False
    loading: bool = False
    stale: bool = False
    opened_at: datetime
    saved_at: datetime | None = None
    all_selected: bool = False
    menus: list[MenuView] = Field(default_factory=list)


def build_screen_view(screen_id: str, screen: PermissionScreen) -> ScreenView:
    """Render a screen. A screen whose matrix is not loaded yet shows no menus."""
    menus: list[MenuView] = []
    all_selected = False
    if screen.is_ready:
        menus = [MenuView.from_entry(entry) for entry in screen.matrix]
        all_selected = screen.is_matrix_fully_selected()
    return ScreenView(
        screen_id=screen_id,
        account_id=screen.account_id,
        profile=ProfileView.from_profile(screen.profile) if screen.profile else None,
        message=screen.message,
        saving=screen.saving,
        loading=screen.loading,
        stale=screen.stale,
        opened_at=screen.opened_at,
        saved_at=screen.saved_at,
        all_selected=all_selected,
        menus=menus,
    )
