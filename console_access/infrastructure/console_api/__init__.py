"""Console API adapters: menu catalog, grant store, and account directory over httpx."""

from console_access.infrastructure.console_api.account_directory import HttpAccountDirectory
from console_access.infrastructure.console_api.client import ConsoleApiClient, bearer_token
from console_access.infrastructure.console_api.grant_store import HttpGrantStore
from console_access.infrastructure.console_api.menu_catalog import HttpMenuCatalog

__all__ = [
    "ConsoleApiClient",
    "HttpAccountDirectory",
    "HttpGrantStore",
    "HttpMenuCatalog",
    "bearer_token",
]
