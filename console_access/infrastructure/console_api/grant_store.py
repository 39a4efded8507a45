"""Grant store backed by /user-permissions (implements IGrantStore).

- GET /user-permissions/{menuId}/{accountId} lists one menu's grants.
- PUT /user-permissions/{routeId} upserts the whole serialized matrix.
  routeId only satisfies the route; the store reads everything it needs
  (including the account) from the body.
"""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import quote

import httpx

from console_access.application.dtos.grant_record import MenuGrantRecord
from console_access.domain.entities import AccountId, PermissionGrant
from console_access.domain.exceptions import GrantFetchException, SaveRejectedException
from console_access.infrastructure.console_api._wire import (
    GrantPayload,
    decode_stored_grants,
    encode_bulk_upsert,
    parse_rows,
    to_grant,
    unwrap_result,
)
from console_access.infrastructure.console_api.client import ConsoleApiClient


DEFAULT_BULK_UPSERT_ROUTE_ID = "1"


class HttpGrantStore:
    """Per-(menu, account) grant lookup and bulk upsert over the console API."""

    def __init__(
        self,
        api: ConsoleApiClient,
        bulk_upsert_route_id: str = DEFAULT_BULK_UPSERT_ROUTE_ID,
    ) -> None:
        self._api = api
        self._route_id = bulk_upsert_route_id

    async def list_grants(self, menu_id: int, account_id: AccountId) -> list[PermissionGrant]:
        """Return stored grants; a 404 means none. Other failures raise GrantFetchException."""
        path = f"/user-permissions/{menu_id}/{quote(str(account_id), safe='')}"
        try:
            body = await self._api.get_json(path)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return []
            raise GrantFetchException(
                menu_id, account_id, f"status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise GrantFetchException(menu_id, account_id, str(e)) from e
        grants = []
        for payload in parse_rows(unwrap_result(body), GrantPayload, "grant"):
            grant = to_grant(payload, menu_id, account_id)
            if grant is not None:
                grants.append(grant)
        return grants

    async def bulk_upsert(
        self,
        account_id: AccountId,
        records: Sequence[MenuGrantRecord],
    ) -> list[PermissionGrant] | None:
        """Submit every record in one PUT. Raises SaveRejectedException on any failure."""
        body = encode_bulk_upsert(records)
        path = f"/user-permissions/{quote(self._route_id, safe='')}"
        try:
            reply = await self._api.put_json(path, body)
        except httpx.HTTPStatusError as e:
            raise SaveRejectedException(
                account_id,
                reason=e.response.reason_phrase or None,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise SaveRejectedException(account_id, reason=str(e)) from e
        return decode_stored_grants(reply, account_id)
