"""Account schemas for the admin console.

The console speaks camelCase, so response models serialize by alias.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccountStatusResponse(CamelModel):
    """Returned by suspend, activate and status updates."""

    id: UUID
    email: str
    first_name: str | None = None
    last_name: str | None = None
    is_active: bool


class SuspendedAccount(CamelModel):
    id: UUID
    email: str
    first_name: str | None = None
    last_name: str | None = None
    kyc_status: str | None = None
    last_login: datetime | None = None
    created_at: datetime | None = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class SuspendedAccountsResponse(CamelModel):
    users: list[SuspendedAccount]
    pagination: Pagination


class AccountResponse(CamelModel):
    """Full account view without credentials."""

    id: UUID
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    country: str | None = None
    role: str | None = None
    is_active: bool | None = None
    balance: Decimal | None = None
    kyc_status: str | None = None
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AccountListResponse(CamelModel):
    users: list[AccountResponse]
    total: int


class StatusUpdateRequest(CamelModel):
    is_active: bool = Field(..., description="New active flag")
