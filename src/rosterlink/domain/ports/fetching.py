"""Ports for fetching member and provider data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rosterlink.domain.model import ExternalUser, InternalMember, Role, WageSchedule


@runtime_checkable
class MemberSource(Protocol):
    """Source of the organization's internal team-member records."""

    def list_members(
        self,
        organization_id: str,
        *,
        is_active: bool = True,
    ) -> Sequence[InternalMember]: ...


@runtime_checkable
class ExternalUserSource(Protocol):
    """Source of active users from the workforce-management provider."""

    def list_active_users(self, organization_id: str) -> Sequence[ExternalUser]: ...


@runtime_checkable
class RoleSource(Protocol):
    def list_roles(self, organization_id: str) -> Sequence[Role]: ...


@runtime_checkable
class WageSource(Protocol):
    """Per-user wage lookup; called lazily when an operator expands a row."""

    async def list_wages(self, organization_id: str, external_user_id: int) -> WageSchedule: ...


__all__ = ["ExternalUserSource", "MemberSource", "RoleSource", "WageSource"]
