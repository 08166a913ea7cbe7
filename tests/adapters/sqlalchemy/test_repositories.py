from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from rosterlink.adapters.sqlalchemy.repositories import (
    SqlAlchemyActivityRecorder,
    SqlAlchemyMemberRepository,
)
from rosterlink.domain.errors import MemberNotFoundError, StaleMemberError
from rosterlink.domain.ports import ActivityEntry, MemberLink
from tests.helpers.reconciliation import make_member

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

SYNCED_AT = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _link(member_id: str, *, external_id: str = "7") -> MemberLink:
    return MemberLink(
        member_id=member_id,
        organization_id="org-1",
        external_id=external_id,
        external_source="7shifts",
        external_data={"id": int(external_id), "first_name": "Marcus"},
        synced_at=SYNCED_AT,
    )


@pytest.fixture
def repository(sqlite_session: Session) -> SqlAlchemyMemberRepository:
    repo = SqlAlchemyMemberRepository(sqlite_session)
    repo.add(make_member("m-2", "Zoe", "Adams"))
    repo.add(make_member("m-1", "Marcus", "Chen"))
    repo.add(make_member("m-3", "Anna", "Chen"))
    repo.add(make_member("m-4", "Old", "Timer", is_active=False))
    repo.add(make_member("m-5", "Other", "Org", organization_id="org-2"))
    sqlite_session.flush()
    return repo


def test_list_members_orders_by_name_and_filters(repository: SqlAlchemyMemberRepository) -> None:
    active = repository.list_members("org-1")
    inactive = repository.list_members("org-1", is_active=False)

    assert [member.id for member in active] == ["m-2", "m-3", "m-1"]
    assert [member.id for member in inactive] == ["m-4"]


def test_get_is_scoped_to_organization(repository: SqlAlchemyMemberRepository) -> None:
    assert repository.get("org-1", "m-1") is not None
    assert repository.get("org-1", "m-5") is None


def test_add_requires_organization(repository: SqlAlchemyMemberRepository) -> None:
    with pytest.raises(ValueError, match="organization_id"):
        repository.add(make_member("m-9", "No", "Org", organization_id=None))


def test_store_link_writes_link_columns(repository: SqlAlchemyMemberRepository) -> None:
    member = repository.store_link(_link("m-1"), expected_last_synced_at=None)

    assert member.external_id == "7"
    assert member.external_source == "7shifts"
    assert member.last_synced_at == SYNCED_AT
    assert repository.external_data("org-1", "m-1") == {"id": 7, "first_name": "Marcus"}


def test_store_link_rejects_stale_expectation(repository: SqlAlchemyMemberRepository) -> None:
    repository.store_link(_link("m-1"), expected_last_synced_at=None)

    with pytest.raises(StaleMemberError):
        repository.store_link(_link("m-1", external_id="8"), expected_last_synced_at=None)

    member = repository.get("org-1", "m-1")
    assert member is not None
    assert member.external_id == "7"


def test_store_link_accepts_matching_expectation(repository: SqlAlchemyMemberRepository) -> None:
    repository.store_link(_link("m-1"), expected_last_synced_at=None)

    member = repository.store_link(_link("m-1", external_id="8"), expected_last_synced_at=SYNCED_AT)

    assert member.external_id == "8"


def test_store_link_missing_member(repository: SqlAlchemyMemberRepository) -> None:
    with pytest.raises(MemberNotFoundError):
        repository.store_link(_link("missing"), expected_last_synced_at=None)


def test_activity_recorder_round_trip(sqlite_session: Session) -> None:
    recorder = SqlAlchemyActivityRecorder(sqlite_session)
    recorder.record(
        ActivityEntry(
            organization_id="org-1",
            actor="user-9",
            activity_type="settings_changed",
            details={"action": "employee_match", "saved": 2},
            occurred_at=SYNCED_AT,
        )
    )

    entries = recorder.list_entries("org-1")

    assert entries == [
        {
            "user_id": "user-9",
            "activity_type": "settings_changed",
            "details": {"action": "employee_match", "saved": 2},
            "created_at": SYNCED_AT,
        }
    ]
    assert recorder.list_entries("org-2") == []
