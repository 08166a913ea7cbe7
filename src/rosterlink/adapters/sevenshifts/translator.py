"""Translate 7shifts payloads into domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rosterlink.domain.model import ExternalUser, Role, WageRecord, WageSchedule, WageType

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .schema import RolePayload, SevenShiftsWageType, UserPayload, WagePayload, WagesPayload

_WAGE_TYPE_MAP: dict[SevenShiftsWageType, WageType] = {
    "hourly": WageType.HOURLY,
    "weekly_salary": WageType.SALARY,
}


def parse_external_user(payload: UserPayload, *, raw: Mapping[str, Any]) -> ExternalUser:
    return ExternalUser(
        id=payload.id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        mobile_phone=payload.mobile_phone,
        type=payload.type,
        raw_payload=dict(raw),
    )


def parse_wage(payload: WagePayload) -> WageRecord:
    return WageRecord(
        wage_cents=payload.wage_cents,
        wage_type=_WAGE_TYPE_MAP[payload.wage_type],
        effective_date=payload.effective_date,
        role_id=payload.role_id,
    )


def parse_wage_schedule(payload: WagesPayload) -> WageSchedule:
    return WageSchedule(
        current_wages=tuple(parse_wage(wage) for wage in payload.current_wages),
        upcoming_wages=tuple(parse_wage(wage) for wage in payload.upcoming_wages),
    )


def parse_role(payload: RolePayload) -> Role:
    return Role(id=payload.id, name=payload.name)
