"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from rosterlink.adapters.sqlalchemy.tables import activity_log_table, team_member_table
from rosterlink.domain.errors import MemberNotFoundError, PersistenceError, StaleMemberError
from rosterlink.domain.model import InternalMember

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from sqlalchemy.orm import Session

    from rosterlink.domain.ports import ActivityEntry, MemberLink

_MEMBER_COLUMNS = (
    team_member_table.c.id,
    team_member_table.c.organization_id,
    team_member_table.c.first_name,
    team_member_table.c.last_name,
    team_member_table.c.punch_id,
    team_member_table.c.email,
    team_member_table.c.phone,
    team_member_table.c.is_active,
    team_member_table.c.external_id,
    team_member_table.c.external_source,
    team_member_table.c.last_synced_at,
)


def _member_from_row(row: Mapping[str, Any]) -> InternalMember:
    return InternalMember(
        id=row["id"],
        organization_id=row["organization_id"],
        first_name=row["first_name"] or "",
        last_name=row["last_name"] or "",
        punch_id=row["punch_id"],
        email=row["email"],
        phone=row["phone"],
        is_active=bool(row["is_active"]),
        external_id=row["external_id"],
        external_source=row["external_source"],
        last_synced_at=row["last_synced_at"],
    )


class SqlAlchemyMemberRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, member: InternalMember) -> None:
        if member.organization_id is None:
            raise ValueError(f"Team member {member.id} has no organization_id")
        self.session.execute(
            insert(team_member_table).values(
                id=member.id,
                organization_id=member.organization_id,
                first_name=member.first_name,
                last_name=member.last_name,
                punch_id=member.punch_id,
                email=member.email,
                phone=member.phone,
                is_active=member.is_active,
                external_id=member.external_id,
                external_source=member.external_source,
                last_synced_at=member.last_synced_at,
            )
        )

    def list_members(
        self,
        organization_id: str,
        *,
        is_active: bool = True,
    ) -> list[InternalMember]:
        stmt = (
            select(*_MEMBER_COLUMNS)
            .where(team_member_table.c.organization_id == organization_id)
            .where(team_member_table.c.is_active == is_active)
            .order_by(
                team_member_table.c.last_name,
                team_member_table.c.first_name,
                team_member_table.c.id,
            )
        )
        rows = self.session.execute(stmt).mappings().all()
        return [_member_from_row(row) for row in rows]

    def get(self, organization_id: str, member_id: str) -> InternalMember | None:
        stmt = (
            select(*_MEMBER_COLUMNS)
            .where(team_member_table.c.organization_id == organization_id)
            .where(team_member_table.c.id == member_id)
        )
        row = self.session.execute(stmt).mappings().one_or_none()
        return _member_from_row(row) if row is not None else None

    def external_data(self, organization_id: str, member_id: str) -> dict[str, Any] | None:
        stmt = (
            select(team_member_table.c.external_data)
            .where(team_member_table.c.organization_id == organization_id)
            .where(team_member_table.c.id == member_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def store_link(
        self,
        link: MemberLink,
        *,
        expected_last_synced_at: datetime | None,
    ) -> InternalMember:
        synced_column = team_member_table.c.last_synced_at
        guard = (
            synced_column.is_(None)
            if expected_last_synced_at is None
            else synced_column == expected_last_synced_at
        )
        stmt = (
            update(team_member_table)
            .where(team_member_table.c.organization_id == link.organization_id)
            .where(team_member_table.c.id == link.member_id)
            .where(guard)
            .values(
                external_id=link.external_id,
                external_source=link.external_source,
                external_data=link.external_data,
                last_synced_at=link.synced_at,
            )
        )
        try:
            result = self.session.execute(stmt)
            if result.rowcount == 0:
                if self.get(link.organization_id, link.member_id) is None:
                    raise MemberNotFoundError(link.member_id)
                raise StaleMemberError(link.member_id)
            member = self.get(link.organization_id, link.member_id)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Storing link for team member {link.member_id} failed: {exc}"
            ) from exc
        if member is None:
            raise MemberNotFoundError(link.member_id)
        return member


class SqlAlchemyActivityRecorder:
    def __init__(self, session: Session) -> None:
        self.session = session

    def record(self, entry: ActivityEntry) -> None:
        try:
            self.session.execute(
                insert(activity_log_table).values(
                    organization_id=entry.organization_id,
                    user_id=entry.actor,
                    activity_type=entry.activity_type,
                    details=entry.details,
                    created_at=entry.occurred_at,
                )
            )
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Recording activity failed: {exc}") from exc

    def list_entries(self, organization_id: str) -> list[dict[str, Any]]:
        stmt = (
            select(
                activity_log_table.c.user_id,
                activity_log_table.c.activity_type,
                activity_log_table.c.details,
                activity_log_table.c.created_at,
            )
            .where(activity_log_table.c.organization_id == organization_id)
            .order_by(activity_log_table.c.created_at)
        )
        return [dict(row) for row in self.session.execute(stmt).mappings().all()]
