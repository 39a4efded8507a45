"""Permission screens API: open, edit and save one account's permission matrix.

Every write returns the full screen view so the console can re-render the
checkbox grid and its select-all states from a single response. Every route
needs a bearer token, and a screen answers only to the token that opened it
(401 without one, 403 for another).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from console_access.api.v1.dependencies import (
    ScreenCollaborators,
    build_permission_screen,
    get_caller_token,
    get_collaborators,
    get_screen_store,
)
from console_access.core.limiter import limit_saves, limit_writes
from console_access.core.screen_store import PermissionScreenStore
from console_access.schemas.permission_screen import (
    OpenScreenRequest,
    ScreenView,
    SetGrantRequest,
    ToggleKindRequest,
    build_screen_view,
)

router = APIRouter()

ScreenStore = Annotated[PermissionScreenStore, Depends(get_screen_store)]
CallerToken = Annotated[str, Depends(get_caller_token)]


@router.post("", response_model=ScreenView, status_code=201)
@limit_writes
async def open_permission_screen(
    request: Request,
    body: OpenScreenRequest,
    store: ScreenStore,
    caller: CallerToken,
    collaborators: Annotated[ScreenCollaborators, Depends(get_collaborators)],
):
    """Open a screen for an account and load its full matrix.

    The screen is registered only once the matrix has loaded; a catalog
    failure answers 503 and leaves nothing behind.
    """
    screen = build_permission_screen(body.account_id, collaborators)
    await screen.open()
    screen_id = store.add(screen, caller)
    return build_screen_view(screen_id, screen)


@router.get("/{screen_id}", response_model=ScreenView)
async def get_permission_screen(screen_id: str, store: ScreenStore, caller: CallerToken):
    return build_screen_view(screen_id, store.get(screen_id, caller))


@router.post("/{screen_id}/reload", response_model=ScreenView)
@limit_writes
async def reload_permission_screen(
    request: Request,
    screen_id: str,
    store: ScreenStore,
    caller: CallerToken,
):
    """Discard unsaved edits and rebuild the matrix from the grant store."""
    screen = store.get(screen_id, caller)
    await screen.reload()
    return build_screen_view(screen_id, screen)


@router.post("/{screen_id}/toggle", response_model=ScreenView)
@limit_writes
async def toggle_grant(
    request: Request,
    screen_id: str,
    body: ToggleKindRequest,
    store: ScreenStore,
    caller: CallerToken,
):
    screen = store.get(screen_id, caller)
    screen.toggle_kind(body.menu_id, body.kind)
    return build_screen_view(screen_id, screen)


@router.put("/{screen_id}/grants", response_model=ScreenView)
@limit_writes
async def set_grant(
    request: Request,
    screen_id: str,
    body: SetGrantRequest,
    store: ScreenStore,
    caller: CallerToken,
):
    """Set one checkbox to an explicit value (idempotent)."""
    screen = store.get(screen_id, caller)
    screen.set_kind(body.menu_id, body.kind, body.status)
    return build_screen_view(screen_id, screen)


@router.post("/{screen_id}/menus/{menu_id}/toggle-all", response_model=ScreenView)
@limit_writes
async def toggle_menu(
    request: Request,
    screen_id: str,
    menu_id: int,
    store: ScreenStore,
    caller: CallerToken,
):
    """Per-row select all: set all four kinds of the menu to the opposite of its all-selected state."""
    screen = store.get(screen_id, caller)
    screen.toggle_all_kinds_for_menu(menu_id)
    return build_screen_view(screen_id, screen)


@router.post("/{screen_id}/toggle-all", response_model=ScreenView)
@limit_writes
async def toggle_all_menus(
    request: Request,
    screen_id: str,
    store: ScreenStore,
    caller: CallerToken,
):
    """Global select all across every menu and kind."""
    screen = store.get(screen_id, caller)
    screen.toggle_all_menus()
    return build_screen_view(screen_id, screen)


@router.post("/{screen_id}/save", response_model=ScreenView)
@limit_saves
async def save_permission_screen(
    request: Request,
    screen_id: str,
    store: ScreenStore,
    caller: CallerToken,
):
    """Persist the whole matrix in one bulk upsert and return the refreshed screen."""
    screen = store.get(screen_id, caller)
    await screen.save()
    return build_screen_view(screen_id, screen)


@router.delete("/{screen_id}", status_code=204)
@limit_writes
async def close_permission_screen(
    request: Request,
    screen_id: str,
    store: ScreenStore,
    caller: CallerToken,
):
    """Drop the screen and its unsaved edits. Closing an unknown screen is a no-op."""
    store.discard(screen_id, caller)
