"""Commit fully verified pairings to the member store.

Each candidate is written in its own unit of work. Writes are conditional on
the member's ``last_synced_at`` as read at preview time, so a row touched by
another writer in between fails with ``StaleMemberError`` instead of being
overwritten. The first failure stops the batch; candidates after it are
reported as skipped and can be retried with the returned snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from rosterlink.domain.errors import PersistenceError, ValidationError
from rosterlink.domain.model import MatchType, Provider
from rosterlink.domain.ports import ActivityEntry, MemberLink

from .candidates import MatchCandidate, ReconciliationSnapshot, Verification
from .engine import LINKED_CONFIDENCE

if TYPE_CHECKING:
    from collections.abc import Callable

    from rosterlink.domain.ports import ReconciliationUnitOfWork

    from .locking import OrganizationLocks

log = getLogger(__name__)

ACTIVITY_TYPE = "settings_changed"
ACTIVITY_MODULE = "team"
ACTIVITY_ACTION = "employee_match"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class SaveFailure:
    candidate_index: int
    error: PersistenceError


@dataclass(slots=True, kw_only=True)
class SaveResult:
    """Per-item outcome of one save call."""

    snapshot: ReconciliationSnapshot
    saved: list[int] = field(default_factory=list)
    failures: list[SaveFailure] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)

    @property
    def saved_count(self) -> int:
        return len(self.saved)

    @property
    def ok(self) -> bool:
        return not self.failures


def pending_indices(snapshot: ReconciliationSnapshot) -> list[int]:
    """Indices of fully verified, matched candidates that are not linked yet."""

    return [index for index, candidate in enumerate(snapshot) if candidate.is_pending_save]


def save_matches(
    snapshot: ReconciliationSnapshot,
    *,
    organization_id: str,
    actor: str,
    uow_factory: Callable[[], ReconciliationUnitOfWork],
    provider: Provider | str = Provider.SEVENSHIFTS,
    locks: OrganizationLocks | None = None,
    clock: Callable[[], datetime] = _utcnow,
) -> SaveResult:
    """Persist every pending candidate of ``snapshot``.

    Saved candidates come back promoted to ``linked`` in ``SaveResult.snapshot``
    so that saving the returned snapshot again writes nothing.
    """

    if locks is None:
        return _save(
            snapshot,
            organization_id=organization_id,
            actor=actor,
            uow_factory=uow_factory,
            provider=str(provider),
            clock=clock,
        )
    with locks.hold(organization_id):
        return _save(
            snapshot,
            organization_id=organization_id,
            actor=actor,
            uow_factory=uow_factory,
            provider=str(provider),
            clock=clock,
        )


def _save(
    snapshot: ReconciliationSnapshot,
    *,
    organization_id: str,
    actor: str,
    uow_factory: Callable[[], ReconciliationUnitOfWork],
    provider: str,
    clock: Callable[[], datetime],
) -> SaveResult:
    pending = pending_indices(snapshot)
    result = SaveResult(snapshot=snapshot)
    if not pending:
        log.info("Nothing to save for organization %s", organization_id)
        return result

    for position, index in enumerate(pending):
        candidate = snapshot[index]
        try:
            promoted = _store(
                candidate,
                organization_id=organization_id,
                uow_factory=uow_factory,
                provider=provider,
                synced_at=clock(),
            )
        except PersistenceError as exc:
            log.error(
                "Saving link for member %s failed: %s",
                candidate.member.id,
                exc,
            )
            result.failures.append(SaveFailure(index, exc))
            result.skipped.extend(pending[position + 1 :])
            break
        result.snapshot = result.snapshot.with_candidate(index, promoted)
        result.saved.append(index)

    log.info(
        "Saved %s of %s links for organization %s (%s failed, %s skipped)",
        result.saved_count,
        len(pending),
        organization_id,
        len(result.failures),
        len(result.skipped),
    )
    if result.saved:
        _record_activity(
            organization_id=organization_id,
            actor=actor,
            matched_count=result.saved_count,
            uow_factory=uow_factory,
            occurred_at=clock(),
        )
    return result


def _store(
    candidate: MatchCandidate,
    *,
    organization_id: str,
    uow_factory: Callable[[], ReconciliationUnitOfWork],
    provider: str,
    synced_at: datetime,
) -> MatchCandidate:
    user = candidate.matched_external_user
    if user is None:
        raise ValidationError(f"Candidate for member {candidate.member.id} has no provider user")
    link = MemberLink(
        member_id=candidate.member.id,
        organization_id=organization_id,
        external_id=str(user.id),
        external_source=provider,
        external_data=user.audit_snapshot(),
        synced_at=synced_at,
    )
    with uow_factory() as uow:
        member = uow.repositories.members.store_link(
            link,
            expected_last_synced_at=candidate.member.last_synced_at,
        )
        uow.commit()
    return MatchCandidate(
        member=member,
        matched_external_user=user,
        match_type=MatchType.LINKED,
        confidence=LINKED_CONFIDENCE,
        verified=Verification.complete(),
    )


def _record_activity(
    *,
    organization_id: str,
    actor: str,
    matched_count: int,
    uow_factory: Callable[[], ReconciliationUnitOfWork],
    occurred_at: datetime,
) -> None:
    entry = ActivityEntry(
        organization_id=organization_id,
        actor=actor,
        activity_type=ACTIVITY_TYPE,
        details={
            "module": ACTIVITY_MODULE,
            "action": ACTIVITY_ACTION,
            "matched_count": matched_count,
        },
        occurred_at=occurred_at,
    )
    try:
        with uow_factory() as uow:
            uow.repositories.activity.record(entry)
            uow.commit()
    except PersistenceError:
        # links are already committed; the audit row is best effort
        log.exception("Recording match activity for organization %s failed", organization_id)
