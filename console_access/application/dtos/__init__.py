"""Application DTOs: read-models and payloads exchanged with collaborators."""

from console_access.application.dtos.account import AccountProfile
from console_access.application.dtos.grant_record import (
    NOT_CREATED_ID,
    GrantDescriptor,
    MenuGrantRecord,
)

__all__ = [
    "AccountProfile",
    "GrantDescriptor",
    "MenuGrantRecord",
    "NOT_CREATED_ID",
]
