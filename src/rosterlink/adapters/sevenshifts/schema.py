"""Pydantic models describing the 7shifts v2 API payloads.

Only the fields the reconciliation needs are modeled; everything else the
API sends is ignored here and survives untouched in the raw user payload.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

type SevenShiftsWageType = Literal["hourly", "weekly_salary"]


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class SevenShiftsBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CursorPayload(SevenShiftsBaseModel):
    next: str | None = None
    prev: str | None = None

    _normalize = field_validator("next", "prev", mode="before")(_blank_to_none)


class MetaPayload(SevenShiftsBaseModel):
    cursor: CursorPayload | None = None

    @property
    def next_cursor(self) -> str | None:
        return self.cursor.next if self.cursor is not None else None


class UserPayload(SevenShiftsBaseModel):
    id: int
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    mobile_phone: str | None = None
    type: str | None = None

    _normalize_optional = field_validator("email", "mobile_phone", "type", mode="before")(
        _blank_to_none
    )

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value


class UsersPage(SevenShiftsBaseModel):
    """One page of users; items are kept raw so the audit snapshot stays complete."""

    data: list[dict[str, Any]] = Field(default_factory=list)
    meta: MetaPayload | None = None


class WagePayload(SevenShiftsBaseModel):
    wage_type: SevenShiftsWageType
    wage_cents: int
    effective_date: date
    role_id: int | None = None


class WagesPayload(SevenShiftsBaseModel):
    current_wages: list[WagePayload] = Field(default_factory=list)
    upcoming_wages: list[WagePayload] = Field(default_factory=list)


class WagesResponse(SevenShiftsBaseModel):
    data: WagesPayload


class RolePayload(SevenShiftsBaseModel):
    id: int
    name: str


class RolesPage(SevenShiftsBaseModel):
    data: list[RolePayload] = Field(default_factory=list)
    meta: MetaPayload | None = None
