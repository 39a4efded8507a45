"""Account directory backed by GET /account/staff/profile/{accountId}."""

from __future__ import annotations

from urllib.parse import quote

import httpx

from console_access.application.dtos.account import AccountProfile
from console_access.domain.entities import AccountId
from console_access.infrastructure.console_api._wire import to_profile
from console_access.infrastructure.console_api.client import ConsoleApiClient
from console_access.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class HttpAccountDirectory:
    """Loads staff profiles for display; failures return None."""

    def __init__(self, api: ConsoleApiClient) -> None:
        self._api = api

    async def get_profile(self, account_id: AccountId) -> AccountProfile | None:
        path = f"/account/staff/profile/{quote(str(account_id), safe='')}"
        try:
            body = await self._api.get_json(path)
        except httpx.HTTPError as e:
            logger.warning("Profile lookup failed for account %s: %s", account_id, e)
            return None
        return to_profile(body, account_id)
