"""Operator overrides: manual pairing and unlinking."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from rosterlink.domain.errors import ValidationError
from rosterlink.domain.model import MatchType

from .candidates import MatchCandidate, Verification

if TYPE_CHECKING:
    from rosterlink.domain.model import ExternalUser

    from .candidates import ReconciliationSnapshot

log = getLogger(__name__)

MANUAL_CONFIDENCE = 100


def manual_assign(
    snapshot: ReconciliationSnapshot,
    index: int,
    external_user: ExternalUser | int,
) -> ReconciliationSnapshot:
    """Pair an unmatched candidate with a provider user taken from the pool.

    Picking the user by hand counts as identity attestation; roles and wages
    still need explicit verification.
    """

    candidate = snapshot.candidate_at(index)
    if candidate.match_type is not MatchType.UNMATCHED:
        raise ValidationError(
            f"Candidate {index} is {candidate.match_type}; only unmatched candidates "
            "can be assigned manually"
        )
    user_id = external_user if isinstance(external_user, int) else external_user.id
    pooled = snapshot.pool_user(user_id)
    if pooled is None:
        raise ValidationError(f"External user {user_id} is not available in the pool")

    assigned = MatchCandidate(
        member=candidate.member,
        matched_external_user=pooled,
        match_type=MatchType.MANUAL,
        confidence=MANUAL_CONFIDENCE,
        verified=Verification(identity=True),
    )
    pool = tuple(user for user in snapshot.pool if user.id != user_id)
    log.debug("Manually assigned external user %s to member %s", user_id, candidate.member.id)
    return snapshot.with_candidate(index, assigned, pool=pool)


def unlink_match(snapshot: ReconciliationSnapshot, index: int) -> ReconciliationSnapshot:
    """Reject a pairing and return its provider user to the end of the pool."""

    candidate = snapshot.candidate_at(index)
    user = candidate.matched_external_user
    if user is None:
        raise ValidationError(f"Candidate {index} is already unmatched")

    pool = snapshot.pool if snapshot.pool_user(user.id) else (*snapshot.pool, user)
    log.debug(
        "Unlinked external user %s from member %s (%s)",
        user.id,
        candidate.member.id,
        candidate.match_type,
    )
    return snapshot.with_candidate(index, MatchCandidate.unmatched(candidate.member), pool=pool)
