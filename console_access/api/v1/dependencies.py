"""Presentation-layer dependency injection (composition root).

Builds the console API adapters for each request and assembles a
PermissionScreen from them. Routes depend only on these dependencies,
never on the adapters directly. Tests replace get_collaborators through
app.dependency_overrides.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, Request

from console_access.application.interfaces import (
    IAccountDirectory,
    IGrantStore,
    IMenuCatalog,
)
from console_access.application.services import BulkSaveCoordinator, MatrixInitializer
from console_access.application.use_cases import PermissionScreen
from console_access.core.config import Settings, get_settings
from console_access.core.screen_store import PermissionScreenStore
from console_access.domain.entities import AccountId
from console_access.domain.exceptions import AuthenticationException
from console_access.infrastructure.console_api import (
    ConsoleApiClient,
    HttpAccountDirectory,
    HttpGrantStore,
    HttpMenuCatalog,
    bearer_token,
)


@dataclass
class ScreenCollaborators:
    """External systems a permission screen talks to."""

    menu_catalog: IMenuCatalog
    grant_store: IGrantStore
    account_directory: IAccountDirectory | None = None


def get_screen_store(request: Request) -> PermissionScreenStore:
    """Screen store owned by the running app (created in create_app)."""
    return request.app.state.screen_store


def resolve_caller_token(authorization: str | None, settings: Settings) -> str:
    """Return the caller's bearer token.

    Without one, CONSOLE_API_TOKEN stands in only when
    ALLOW_SERVICE_TOKEN_FALLBACK is set; otherwise the call is rejected.

    Raises:
        AuthenticationException: no usable bearer token.
    """
    token = bearer_token(authorization)
    if token is not None:
        return token
    if settings.allow_service_token_fallback and settings.console_api_token is not None:
        return settings.console_api_token.get_secret_value()
    raise AuthenticationException("Bearer token required")


def get_caller_token(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Caller's bearer token; it is forwarded upstream and owns the screens it opens."""
    return resolve_caller_token(authorization, get_settings())


def get_console_api(
    request: Request,
    token: Annotated[str, Depends(get_caller_token)],
) -> ConsoleApiClient:
    """Console API client on the shared httpx client, acting as the caller."""
    http = getattr(request.app.state, "console_http", None)
    if http is None:
        raise RuntimeError("Console API client is not initialized (lifespan not started)")
    return ConsoleApiClient(http, token=token)


def get_collaborators(
    api: Annotated[ConsoleApiClient, Depends(get_console_api)],
) -> ScreenCollaborators:
    settings = get_settings()
    return ScreenCollaborators(
        menu_catalog=HttpMenuCatalog(api),
        grant_store=HttpGrantStore(api, bulk_upsert_route_id=settings.bulk_upsert_route_id),
        account_directory=HttpAccountDirectory(api),
    )


def build_permission_screen(
    account_id: AccountId, collaborators: ScreenCollaborators
) -> PermissionScreen:
    """Wire initializer, save coordinator and screen for one account."""
    initializer = MatrixInitializer(
        collaborators.menu_catalog,
        collaborators.grant_store,
        concurrency=get_settings().grant_fetch_concurrency,
    )
    coordinator = BulkSaveCoordinator(collaborators.grant_store, initializer)
    return PermissionScreen(
        account_id,
        initializer,
        coordinator,
        account_directory=collaborators.account_directory,
    )
