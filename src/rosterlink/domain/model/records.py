"""Team member and provider records.

Records are immutable snapshots. Constructing them from loose mappings goes
through ``from_mapping`` which refuses keys the record does not declare, so
unexpected payload shapes fail at the boundary instead of leaking into the
matching core. The only opaque value is ``ExternalUser.raw_payload``: it keeps
the provider's full user object for the audit column written on link.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, ClassVar, Self

from rosterlink.domain.errors import UnknownFieldError
from rosterlink.domain.model.enums import WageType


def _check_fields(cls: type, data: Mapping[str, object], *, extra: frozenset[str] = frozenset()) -> None:
    known = {f.name for f in fields(cls)} | extra
    unknown = set(data) - known
    if unknown:
        raise UnknownFieldError(cls.__name__, unknown)


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _parse_datetime(value: object) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    normalized = str(value).strip()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    return datetime.fromisoformat(normalized)


def _parse_date(value: object) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


@dataclass(frozen=True, slots=True, kw_only=True)
class InternalMember:
    """Identity record owned by the organization's member store."""

    id: str
    first_name: str
    last_name: str
    punch_id: str | None = None
    email: str | None = None
    phone: str | None = None
    is_active: bool = True
    external_id: str | None = None
    external_source: str | None = None
    organization_id: str | None = None
    last_synced_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> Self:
        _check_fields(cls, data)
        return cls(
            id=str(data["id"]),
            first_name=str(data.get("first_name") or ""),
            last_name=str(data.get("last_name") or ""),
            punch_id=_optional_str(data.get("punch_id")),
            email=_optional_str(data.get("email")),
            phone=_optional_str(data.get("phone")),
            is_active=bool(data.get("is_active", True)),
            external_id=_optional_str(data.get("external_id")),
            external_source=_optional_str(data.get("external_source")),
            organization_id=_optional_str(data.get("organization_id")),
            last_synced_at=_parse_datetime(data.get("last_synced_at")),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "punch_id": self.punch_id,
            "email": self.email,
            "phone": self.phone,
            "is_active": self.is_active,
            "external_id": self.external_id,
            "external_source": self.external_source,
            "organization_id": self.organization_id,
            "last_synced_at": self.last_synced_at.isoformat() if self.last_synced_at else None,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class ExternalUser:
    """Read-only snapshot of one provider user for a reconciliation run."""

    id: int
    first_name: str
    last_name: str
    email: str | None = None
    mobile_phone: str | None = None
    type: str | None = None
    raw_payload: dict[str, Any] = field(default_factory=dict, compare=False, hash=False, repr=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> Self:
        _check_fields(cls, data)
        raw = data.get("raw_payload")
        return cls(
            id=int(str(data["id"])),
            first_name=str(data.get("first_name") or ""),
            last_name=str(data.get("last_name") or ""),
            email=_optional_str(data.get("email")),
            mobile_phone=_optional_str(data.get("mobile_phone")),
            type=_optional_str(data.get("type")),
            raw_payload=dict(raw) if isinstance(raw, Mapping) else {},
        )

    def to_mapping(self, *, include_raw: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "mobile_phone": self.mobile_phone,
            "type": self.type,
        }
        if include_raw:
            data["raw_payload"] = dict(self.raw_payload)
        return data

    def audit_snapshot(self) -> dict[str, Any]:
        """Return the blob stored in ``external_data`` when this user gets linked."""

        if self.raw_payload:
            return dict(self.raw_payload)
        return self.to_mapping(include_raw=False)


@dataclass(frozen=True, slots=True, kw_only=True)
class WageRecord:
    wage_cents: int
    wage_type: WageType
    effective_date: date
    role_id: int | None = None

    @property
    def applies_to_all_roles(self) -> bool:
        return self.role_id is None

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> Self:
        _check_fields(cls, data)
        role_id = data.get("role_id")
        return cls(
            wage_cents=int(str(data["wage_cents"])),
            wage_type=WageType(str(data["wage_type"])),
            effective_date=_parse_date(data["effective_date"]),
            role_id=None if role_id is None else int(str(role_id)),
        )


@dataclass(frozen=True, slots=True)
class WageSchedule:
    """Current and not-yet-effective wages of one provider user."""

    current_wages: tuple[WageRecord, ...] = ()
    upcoming_wages: tuple[WageRecord, ...] = ()

    EMPTY: ClassVar[WageSchedule]

    @property
    def is_empty(self) -> bool:
        return not self.current_wages and not self.upcoming_wages

    def for_role(self, role_id: int | None) -> tuple[WageRecord, ...]:
        """Current wages that apply to ``role_id`` (role-agnostic wages included)."""

        return tuple(
            wage
            for wage in self.current_wages
            if wage.applies_to_all_roles or wage.role_id == role_id
        )


WageSchedule.EMPTY = WageSchedule()


@dataclass(frozen=True, slots=True)
class Role:
    id: int
    name: str
