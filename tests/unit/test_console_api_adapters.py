"""Console API adapters against httpx.MockTransport (no network)."""

import json

import httpx
import pytest

from console_access.application.dtos.grant_record import GrantDescriptor, MenuGrantRecord
from console_access.domain.enums import PermissionKind
from console_access.domain.exceptions import (
    CatalogUnavailableException,
    GrantFetchException,
    SaveRejectedException,
)
from console_access.infrastructure.console_api import (
    ConsoleApiClient,
    HttpAccountDirectory,
    HttpGrantStore,
    HttpMenuCatalog,
    bearer_token,
)

BASE_URL = "http://console.test/api"


def _api(handler, token: str | None = "tok") -> ConsoleApiClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    return ConsoleApiClient(http, token=token)


def _json(status: int, body) -> httpx.Response:
    return httpx.Response(status, json=body)


class TestBearerToken:
    def test_extracts_token(self) -> None:
        assert bearer_token("Bearer abc") == "abc"
        assert bearer_token("bearer  abc ") == "abc"

    @pytest.mark.parametrize("raw", [None, "", "Basic abc", "Bearer "])
    def test_rejects_other_values(self, raw) -> None:
        assert bearer_token(raw) is None


class TestHttpMenuCatalog:
    async def test_wrapped_result_and_auth_header(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers.get("Authorization")
            return _json(200, {"result": [{"id": 1, "name": "Users"}, {"id": 2, "name": "Courses"}]})

        menus = await HttpMenuCatalog(_api(handler)).list_menus()
        assert [(m.id, m.name) for m in menus] == [(1, "Users"), (2, "Courses")]
        assert seen == {"path": "/api/menus", "auth": "Bearer tok"}

    async def test_bare_list_and_malformed_rows(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return _json(200, [{"id": 1, "name": "Users"}, {"name": "no id"}, {"id": 3, "name": None}])

        menus = await HttpMenuCatalog(_api(handler)).list_menus()
        assert [(m.id, m.name) for m in menus] == [(1, "Users"), (3, "")]

    async def test_server_error(self) -> None:
        api = _api(lambda request: _json(500, {"message": "boom"}))
        with pytest.raises(CatalogUnavailableException) as exc_info:
            await HttpMenuCatalog(api).list_menus()
        assert "500" in exc_info.value.details["reason"]

    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(CatalogUnavailableException):
            await HttpMenuCatalog(_api(handler)).list_menus()

    async def test_unexpected_payload(self) -> None:
        api = _api(lambda request: _json(200, {"result": {"id": 1}}))
        with pytest.raises(CatalogUnavailableException):
            await HttpMenuCatalog(api).list_menus()


class TestHttpGrantStore:
    async def test_list_grants(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            return _json(200, {"result": [
                {"id": "g-9", "permissionId": 2, "status": True},
                {"id": 77, "permissionId": 9, "status": True},
                {"id": 0, "permissionId": 4, "status": None},
            ]})

        grants = await HttpGrantStore(_api(handler)).list_grants(1, 42)

        assert seen["path"] == "/api/user-permissions/1/42"
        assert [(g.kind, g.status, g.persisted_id) for g in grants] == [
            (PermissionKind.READ, True, "g-9"),
            (PermissionKind.DELETE, False, None),
        ]
        assert all((g.account_id, g.menu_id) == (42, 1) for g in grants)

    async def test_not_found_means_no_grants(self) -> None:
        api = _api(lambda request: _json(404, {"message": "none"}))
        assert await HttpGrantStore(api).list_grants(1, 42) == []

    async def test_server_error_raises_grant_fetch(self) -> None:
        api = _api(lambda request: _json(502, {}))
        with pytest.raises(GrantFetchException) as exc_info:
            await HttpGrantStore(api).list_grants(1, 42)
        assert exc_info.value.details["menu_id"] == 1

    async def test_bulk_upsert_sends_whole_matrix(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200)

        records = [
            MenuGrantRecord(
                menu_id=1,
                grants=(
                    GrantDescriptor(0, 42, 1, 1, True),
                    GrantDescriptor("g-9", 42, 1, 2, True),
                ),
            )
        ]
        stored = await HttpGrantStore(_api(handler), bulk_upsert_route_id="7").bulk_upsert(42, records)

        assert stored is None
        assert (seen["method"], seen["path"]) == ("PUT", "/api/user-permissions/7")
        assert seen["body"] == {
            "menu": [
                {
                    "id": 1,
                    "userPermission": [
                        {
                            "id": 0,
                            "accountId": 42,
                            "menuId": 1,
                            "permissionId": 1,
                            "status": True,
                            "permission": {"id": 1},
                        },
                        {
                            "id": "g-9",
                            "accountId": 42,
                            "menuId": 1,
                            "permissionId": 2,
                            "status": True,
                            "permission": {"id": 2},
                        },
                    ],
                }
            ]
        }

    async def test_bulk_upsert_reads_assigned_ids(self) -> None:
        api = _api(lambda request: _json(200, {"result": [
            {"id": 501, "menuId": 1, "permissionId": 1, "status": True},
            {"id": 502, "permissionId": 2, "status": True},
        ]}))
        stored = await HttpGrantStore(api).bulk_upsert(42, [])
        assert [(g.menu_id, g.kind, g.persisted_id) for g in stored] == [(1, PermissionKind.CREATE, 501)]

    async def test_bulk_upsert_rejected(self) -> None:
        api = _api(lambda request: _json(403, {"message": "forbidden"}))
        with pytest.raises(SaveRejectedException) as exc_info:
            await HttpGrantStore(api).bulk_upsert(42, [])
        assert exc_info.value.details["status_code"] == 403

    async def test_bulk_upsert_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(SaveRejectedException):
            await HttpGrantStore(_api(handler)).bulk_upsert(42, [])


class TestHttpAccountDirectory:
    async def test_profile(self) -> None:
        api = _api(lambda request: _json(200, {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "email": "ada@example.com",
            "role": "ADMIN",
            "status": "active",
        }))
        profile = await HttpAccountDirectory(api).get_profile(42)
        assert profile.display_name == "Ada Lovelace"
        assert profile.is_active

    async def test_failure_returns_none(self) -> None:
        api = _api(lambda request: _json(500, {}))
        assert await HttpAccountDirectory(api).get_profile(42) is None


async def test_invalid_json_raises_decoding_error() -> None:
    api = _api(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(httpx.DecodingError):
        await api.get_json("/menus")
