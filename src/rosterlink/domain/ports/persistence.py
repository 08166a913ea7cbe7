"""Ports for persisting confirmed links."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from rosterlink.domain.model import InternalMember


@dataclass(frozen=True, slots=True, kw_only=True)
class MemberLink:
    """Link columns written onto one member record."""

    member_id: str
    organization_id: str
    external_id: str
    external_source: str
    external_data: dict[str, Any] = field(default_factory=dict)
    synced_at: datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class ActivityEntry:
    organization_id: str
    actor: str
    activity_type: str
    details: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime


@runtime_checkable
class MemberRepository(Protocol):
    """Persistence contract for team-member link columns."""

    def list_members(
        self,
        organization_id: str,
        *,
        is_active: bool = True,
    ) -> list[InternalMember]: ...

    def get(self, organization_id: str, member_id: str) -> InternalMember | None: ...

    def store_link(
        self,
        link: MemberLink,
        *,
        expected_last_synced_at: datetime | None,
    ) -> InternalMember:
        """Write ``link`` if the row still carries ``expected_last_synced_at``.

        Raises ``MemberNotFoundError`` when the row is gone and
        ``StaleMemberError`` when another writer touched it first.
        """
        ...


@runtime_checkable
class ActivityRecorder(Protocol):
    """Append-only audit trail of operator actions."""

    def record(self, entry: ActivityEntry) -> None: ...


__all__ = ["ActivityEntry", "ActivityRecorder", "MemberLink", "MemberRepository"]
