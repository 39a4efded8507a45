"""Thin async client for the admin console REST API.

All calls go through one shared httpx.AsyncClient (created in the app
lifespan with the console API base URL and timeout) so they never block
the event loop and reuse connections. A bearer token is attached per
client instance, so each permission screen talks to the API as the
administrator who opened it.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from console_access.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an 'Authorization: Bearer <token>' header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class ConsoleApiClient:
    """JSON-over-HTTP access to the console API with bearer-token auth."""

    def __init__(self, http: httpx.AsyncClient, token: str | None = None) -> None:
        self._http = http
        self._token = token

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def get_json(self, path: str) -> Any:
        """GET path and decode JSON. Raises httpx.HTTPStatusError on non-2xx."""
        return await self._request("GET", path)

    async def put_json(self, path: str, body: dict[str, Any]) -> Any:
        """PUT a JSON body and decode the JSON reply (None for an empty body)."""
        return await self._request("PUT", path, body)

    async def _request(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        resp = await self._http.request(method, path, headers=self._headers(), json=body)
        if resp.is_error:
            logger.debug("%s %s -> %d", method, path, resp.status_code)
            resp.raise_for_status()
        raw = resp.content
        if not raw:
            return None
        try:
            return json.loads(raw.decode())
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise httpx.DecodingError(f"Invalid JSON from {method} {path}", request=resp.request) from e
