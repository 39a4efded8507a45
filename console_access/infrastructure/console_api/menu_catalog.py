"""Menu catalog backed by GET /menus (implements IMenuCatalog)."""

from __future__ import annotations

import httpx

from console_access.domain.entities import Menu
from console_access.domain.exceptions import CatalogUnavailableException
from console_access.infrastructure.console_api._wire import (
    MenuPayload,
    parse_rows,
    to_menu,
    unwrap_result,
)
from console_access.infrastructure.console_api.client import ConsoleApiClient


class HttpMenuCatalog:
    """Lists every manageable menu of the console, in API order."""

    def __init__(self, api: ConsoleApiClient) -> None:
        self._api = api

    async def list_menus(self) -> list[Menu]:
        try:
            body = await self._api.get_json("/menus")
        except httpx.HTTPStatusError as e:
            raise CatalogUnavailableException(
                f"GET /menus returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise CatalogUnavailableException(f"GET /menus failed: {e}") from e
        rows = unwrap_result(body)
        if rows is None:
            rows = []
        if not isinstance(rows, list):
            raise CatalogUnavailableException("GET /menus returned an unexpected payload")
        return [to_menu(p) for p in parse_rows(rows, MenuPayload, "menu")]
