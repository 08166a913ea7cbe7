"""Match internal team members against provider users.

Members are visited in input order and each one claims at most one provider
user from the shared pool, so earlier members win ambiguous names. Rule
priority per member:

1) already linked (``external_id`` equals the provider id)
2) exact full name
3) exact e-mail
4) best fuzzy name score at or above ``SUGGESTION_THRESHOLD``
5) unmatched

Callers must pass members in a deterministic order (see ``member_sort_key``).
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from rosterlink.domain.model import MatchType

from .candidates import MatchCandidate, ReconciliationSnapshot, Verification
from .normalize import full_name_key, normalize
from .pool import CandidatePool
from .scoring import combined_name_score, round_half_up

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from rosterlink.domain.model import ExternalUser, InternalMember

log = getLogger(__name__)

LINKED_CONFIDENCE = 100
EXACT_NAME_CONFIDENCE = 95
EXACT_EMAIL_CONFIDENCE = 90
SUGGESTION_THRESHOLD = 60


@dataclass(frozen=True, slots=True)
class _Claim:
    user: ExternalUser
    match_type: MatchType
    confidence: int


type MatchRule = Callable[[InternalMember, CandidatePool], _Claim | None]


def member_sort_key(member: InternalMember) -> tuple[str, str, str]:
    """Default deterministic member order: last name, first name, then id."""

    return (normalize(member.last_name), normalize(member.first_name), member.id)


def build_matches(
    members: Sequence[InternalMember],
    external_users: Iterable[ExternalUser],
) -> ReconciliationSnapshot:
    """Produce one candidate per member plus the provider users left unclaimed."""

    pool = CandidatePool(external_users)
    candidates: list[MatchCandidate] = []

    for member in members:
        claim = _first_claim(member, pool)
        if claim is None:
            candidates.append(MatchCandidate.unmatched(member))
            continue
        pool.take(claim.user)
        candidates.append(
            MatchCandidate(
                member=member,
                matched_external_user=claim.user,
                match_type=claim.match_type,
                confidence=claim.confidence,
                verified=(
                    Verification.complete()
                    if claim.match_type is MatchType.LINKED
                    else Verification.none()
                ),
            )
        )

    log.debug(
        "Built %s candidates, %s provider users left unclaimed",
        len(candidates),
        len(pool),
    )
    return ReconciliationSnapshot(candidates=tuple(candidates), pool=pool.snapshot())


def _first_claim(member: InternalMember, pool: CandidatePool) -> _Claim | None:
    for rule in _RULES:
        claim = rule(member, pool)
        if claim is not None:
            return claim
    return None


def _match_linked(member: InternalMember, pool: CandidatePool) -> _Claim | None:
    if not member.external_id:
        return None
    linked_id = member.external_id.strip()
    user = pool.find(lambda candidate: str(candidate.id) == linked_id)
    if user is None:
        return None
    return _Claim(user, MatchType.LINKED, LINKED_CONFIDENCE)


def _match_exact_name(member: InternalMember, pool: CandidatePool) -> _Claim | None:
    member_key = full_name_key(member.first_name, member.last_name)
    if not member_key:
        return None
    user = pool.find(
        lambda candidate: full_name_key(candidate.first_name, candidate.last_name) == member_key
    )
    if user is None:
        return None
    return _Claim(user, MatchType.EXACT, EXACT_NAME_CONFIDENCE)


def _match_exact_email(member: InternalMember, pool: CandidatePool) -> _Claim | None:
    member_email = normalize(member.email)
    if not member_email:
        return None
    user = pool.find(lambda candidate: normalize(candidate.email) == member_email)
    if user is None:
        return None
    return _Claim(user, MatchType.EXACT, EXACT_EMAIL_CONFIDENCE)


def _match_fuzzy_name(member: InternalMember, pool: CandidatePool) -> _Claim | None:
    best_user: ExternalUser | None = None
    best_score = 0.0
    for candidate in pool:
        score = combined_name_score(
            member.first_name,
            member.last_name,
            candidate.first_name,
            candidate.last_name,
        )
        # strict comparison: the first maximum in pool order wins ties
        if score > best_score:
            best_user = candidate
            best_score = score
    if best_user is None or best_score < SUGGESTION_THRESHOLD:
        return None
    return _Claim(best_user, MatchType.SUGGESTED, round_half_up(best_score))


_RULES: tuple[MatchRule, ...] = (
    _match_linked,
    _match_exact_name,
    _match_exact_email,
    _match_fuzzy_name,
)
