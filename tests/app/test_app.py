from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from rosterlink.adapters.sqlalchemy.repositories import SqlAlchemyActivityRecorder
from rosterlink.app import (
    UnitOfWorkMemberSource,
    list_roles,
    load_wages,
    preview_match,
    save_matches,
)
from rosterlink.domain.errors import FetchError, PartialDataError, StaleMemberError
from rosterlink.domain.model import MatchType, Provider, Role, WageRecord, WageSchedule, WageType
from rosterlink.domain.reconciliation import OrganizationLocks, toggle_verification
from tests.helpers.reconciliation import (
    FakeExternalUserSource,
    FakeMemberSource,
    FakeWageSource,
    make_member,
    make_user,
    member_ids,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from rosterlink.adapters.sqlalchemy.unit_of_work import SqlAlchemyReconciliationUnitOfWork
    from rosterlink.domain.reconciliation import ReconciliationSnapshot

type UowFactory = Callable[[], SqlAlchemyReconciliationUnitOfWork]


class FakeRoleSource:
    def __init__(self, roles: list[Role], *, error: Exception | None = None) -> None:
        self.roles = roles
        self.error = error

    def list_roles(self, organization_id: str) -> list[Role]:
        _ = organization_id
        if self.error is not None:
            raise self.error
        return self.roles


def _verify_all(snapshot: ReconciliationSnapshot, index: int) -> ReconciliationSnapshot:
    for step in ("identity", "roles", "wages"):
        snapshot = toggle_verification(snapshot, index, step)
    return snapshot


@pytest.fixture
def seeded_uow(sqlite_unit_of_work: UowFactory) -> UowFactory:
    with sqlite_unit_of_work() as uow:
        members = uow.repositories.members
        members.add(make_member("m-1", "Marcus", "Chen"))
        members.add(make_member("m-2", "Steve", "Popp"))
        members.add(make_member("m-3", "Nobody", "Known"))
        members.add(make_member("m-4", "Gone", "Away", is_active=False))
        uow.commit()
    return sqlite_unit_of_work


def test_preview_sorts_members_and_matches(seeded_uow: UowFactory) -> None:
    users = FakeExternalUserSource(
        [make_user(1, "Chef Steve", "Popp"), make_user(2, "Marcus", "Chen")]
    )

    snapshot = preview_match(
        "org-1",
        actor="tester",
        member_source=UnitOfWorkMemberSource(seeded_uow),
        user_source=users,
    )

    assert member_ids(snapshot) == ["m-1", "m-3", "m-2"]
    assert [candidate.match_type for candidate in snapshot] == [
        MatchType.EXACT,
        MatchType.UNMATCHED,
        MatchType.SUGGESTED,
    ]
    assert snapshot.pool == ()


def test_preview_wraps_source_failures() -> None:
    with pytest.raises(FetchError) as exc:
        preview_match(
            "org-1",
            actor="tester",
            member_source=FakeMemberSource([]),
            user_source=FakeExternalUserSource([], error=RuntimeError("7shifts down")),
        )

    assert isinstance(exc.value.__cause__, RuntimeError)


def test_save_persists_links_and_records_activity(seeded_uow: UowFactory) -> None:
    snapshot = preview_match(
        "org-1",
        actor="tester",
        member_source=UnitOfWorkMemberSource(seeded_uow),
        user_source=FakeExternalUserSource(
            [make_user(2, "Marcus", "Chen", raw_payload={"id": 2, "punch_id": "42"})]
        ),
    )
    snapshot = _verify_all(snapshot, 0)

    result = save_matches(
        snapshot,
        organization_id="org-1",
        actor="tester",
        unit_of_work_factory=seeded_uow,
        provider=Provider.SEVENSHIFTS,
        locks=OrganizationLocks(),
    )

    assert result.ok
    assert result.saved == [0]
    assert result.snapshot[0].match_type is MatchType.LINKED
    with seeded_uow() as uow:
        member = uow.repositories.members.get("org-1", "m-1")
        external_data = uow.repositories.members.external_data("org-1", "m-1")
        activity = SqlAlchemyActivityRecorder(uow.session).list_entries("org-1")
    assert member is not None
    assert member.external_id == "2"
    assert member.external_source == "7shifts"
    assert external_data == {"id": 2, "punch_id": "42"}
    assert len(activity) == 1
    assert activity[0]["user_id"] == "tester"
    assert activity[0]["details"]["matched_count"] == 1


def test_save_detects_concurrent_write(seeded_uow: UowFactory) -> None:
    snapshot = preview_match(
        "org-1",
        actor="tester",
        member_source=UnitOfWorkMemberSource(seeded_uow),
        user_source=FakeExternalUserSource([make_user(2, "Marcus", "Chen")]),
    )
    snapshot = _verify_all(snapshot, 0)
    first = save_matches(
        snapshot,
        organization_id="org-1",
        actor="tester",
        unit_of_work_factory=seeded_uow,
        provider=Provider.SEVENSHIFTS,
        locks=OrganizationLocks(),
    )
    assert first.ok

    second = save_matches(
        snapshot,
        organization_id="org-1",
        actor="someone-else",
        unit_of_work_factory=seeded_uow,
        provider=Provider.SEVENSHIFTS,
        locks=OrganizationLocks(),
    )

    assert not second.ok
    assert isinstance(second.failures[0].error, StaleMemberError)
    assert second.snapshot == snapshot


def test_load_wages_isolates_failures() -> None:
    schedule = WageSchedule(
        current_wages=(
            WageRecord(
                wage_cents=1850,
                wage_type=WageType.HOURLY,
                effective_date=date(2025, 1, 1),
            ),
        )
    )
    source = FakeWageSource({1: schedule}, failing=[2])

    results = load_wages("org-1", [1, 2, 1], source=source, max_concurrency=2)

    assert results[1] == schedule
    assert isinstance(results[2], PartialDataError)
    assert results[2].external_user_id == 2
    assert sorted(source.calls) == [1, 2]


def test_list_roles_passes_through() -> None:
    roles = [Role(id=3, name="Line Cook")]

    assert list_roles("org-1", source=FakeRoleSource(roles)) == roles


def test_list_roles_wraps_failures() -> None:
    with pytest.raises(FetchError):
        list_roles("org-1", source=FakeRoleSource([], error=RuntimeError("boom")))
