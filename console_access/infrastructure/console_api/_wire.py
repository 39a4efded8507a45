"""Console API wire format: pydantic models and conversion helpers.

The console API speaks camelCase JSON and usually wraps list payloads as
{"result": [...]}; some endpoints return the bare list. Rows that fail
validation are skipped with a warning rather than failing the whole call.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from console_access.application.dtos.account import AccountProfile
from console_access.application.dtos.grant_record import MenuGrantRecord
from console_access.domain.entities import AccountId, Menu, PermissionGrant
from console_access.domain.enums import PermissionKind
from console_access.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class MenuPayload(_WireModel):
    id: int
    name: str | None = ""


class GrantPayload(_WireModel):
    """A stored grant as returned by GET /user-permissions/{menuId}/{accountId}."""

    id: int | str | None = None
    permission_id: int = Field(alias="permissionId")
    status: bool | None = False
    menu_id: int | None = Field(default=None, alias="menuId")
    account_id: int | str | None = Field(default=None, alias="accountId")


class PermissionRef(_WireModel):
    id: int


class UserPermissionPayload(_WireModel):
    id: int | str
    account_id: int | str = Field(alias="accountId")
    menu_id: int = Field(alias="menuId")
    permission_id: int = Field(alias="permissionId")
    status: bool
    permission: PermissionRef


class MenuRecordPayload(_WireModel):
    id: int
    user_permission: list[UserPermissionPayload] = Field(alias="userPermission")


class BulkUpsertBody(_WireModel):
    menu: list[MenuRecordPayload]


class ProfilePayload(_WireModel):
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str | None = None
    role: str | None = None
    status: str | None = None


def unwrap_result(body: Any) -> Any:
    """Return body["result"] for wrapped responses, the body itself otherwise."""
    if isinstance(body, dict) and "result" in body:
        return body["result"]
    return body


def parse_rows(rows: Any, model: type[M], what: str) -> list[M]:
    """Validate each row of a list payload; invalid rows are logged and skipped."""
    if not isinstance(rows, list):
        return []
    parsed: list[M] = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning("Skipping malformed %s row: %s", what, e.errors(include_url=False))
    return parsed


def to_menu(payload: MenuPayload) -> Menu:
    return Menu(id=payload.id, name=payload.name)


def to_grant(
    payload: GrantPayload, menu_id: int, account_id: AccountId
) -> PermissionGrant | None:
    """Map a stored grant to the domain; unknown permission codes yield None."""
    kind = PermissionKind.from_code(payload.permission_id)
    if kind is None:
        logger.debug("Ignoring grant with unknown permission code %s", payload.permission_id)
        return None
    return PermissionGrant(
        account_id=account_id,
        menu_id=menu_id,
        kind=kind,
        status=payload.status,
        persisted_id=payload.id,
    )


def encode_bulk_upsert(records: Sequence[MenuGrantRecord]) -> dict[str, Any]:
    """Encode serialized matrix records as the PUT /user-permissions body."""
    body = BulkUpsertBody(
        menu=[
            MenuRecordPayload(
                id=record.menu_id,
                user_permission=[
                    UserPermissionPayload(
                        id=grant.persisted_id,
                        account_id=grant.account_id,
                        menu_id=grant.menu_id,
                        permission_id=grant.permission_code,
                        status=grant.status,
                        permission=PermissionRef(id=grant.permission_code),
                    )
                    for grant in record.grants
                ],
            )
            for record in records
        ]
    )
    return body.model_dump(by_alias=True)


def decode_stored_grants(body: Any, account_id: AccountId) -> list[PermissionGrant] | None:
    """Grants echoed by the bulk upsert, or None when the reply carries none."""
    rows = parse_rows(unwrap_result(body), GrantPayload, "stored grant")
    grants = [
        grant
        for row in rows
        if row.menu_id is not None
        and (grant := to_grant(row, row.menu_id, account_id)) is not None
    ]
    return grants or None


def to_profile(body: Any, account_id: AccountId) -> AccountProfile | None:
    data = unwrap_result(body)
    if not isinstance(data, dict):
        return None
    try:
        payload = ProfilePayload.model_validate(data)
    except ValidationError as e:
        logger.warning("Malformed profile for account %s: %s", account_id, e.errors(include_url=False))
        return None
    return AccountProfile(
        account_id=account_id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        role=payload.role,
        status=payload.status,
    )
