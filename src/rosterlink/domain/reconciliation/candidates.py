"""Match candidates and the reconciliation snapshot threaded through a session."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Self

from rosterlink.domain.errors import ValidationError
from rosterlink.domain.model import MatchType, VerificationStep

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rosterlink.domain.model import ExternalUser, InternalMember


@dataclass(frozen=True, slots=True)
class Verification:
    """Operator attestations for one pairing."""

    identity: bool = False
    roles: bool = False
    wages: bool = False

    @classmethod
    def none(cls) -> Self:
        return cls()

    @classmethod
    def complete(cls) -> Self:
        return cls(identity=True, roles=True, wages=True)

    @property
    def step_count(self) -> int:
        return sum((self.identity, self.roles, self.wages))

    @property
    def is_complete(self) -> bool:
        return self.identity and self.roles and self.wages

    def is_set(self, step: VerificationStep) -> bool:
        return bool(getattr(self, step.value))

    def toggled(self, step: VerificationStep) -> Verification:
        return replace(self, **{step.value: not self.is_set(step)})


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchCandidate:
    """Pairing proposal for one internal member."""

    member: InternalMember
    matched_external_user: ExternalUser | None
    match_type: MatchType
    confidence: int
    verified: Verification

    def __post_init__(self) -> None:
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"Confidence must be within 0-100 (got {self.confidence})")
        if (self.matched_external_user is None) != (self.match_type is MatchType.UNMATCHED):
            raise ValueError(
                f"match_type={self.match_type} is inconsistent with "
                f"matched_external_user={self.matched_external_user!r}"
            )

    @classmethod
    def unmatched(cls, member: InternalMember) -> Self:
        return cls(
            member=member,
            matched_external_user=None,
            match_type=MatchType.UNMATCHED,
            confidence=0,
            verified=Verification.none(),
        )

    @property
    def is_matched(self) -> bool:
        return self.matched_external_user is not None

    @property
    def is_pending_save(self) -> bool:
        """Fully attested pairing that has not been written to the member store yet."""

        return (
            self.is_matched
            and self.verified.is_complete
            and self.match_type is not MatchType.LINKED
        )


@dataclass(frozen=True, slots=True)
class ReconciliationSnapshot:
    """Candidates for every member plus the provider users nobody claimed.

    Snapshots are immutable; every operator operation returns a new one.
    """

    candidates: tuple[MatchCandidate, ...]
    pool: tuple[ExternalUser, ...] = ()

    def __len__(self) -> int:
        return len(self.candidates)

    def __iter__(self) -> Iterator[MatchCandidate]:
        return iter(self.candidates)

    def __getitem__(self, index: int) -> MatchCandidate:
        return self.candidate_at(index)

    @property
    def unmatched_external_users(self) -> tuple[ExternalUser, ...]:
        return self.pool

    def candidate_at(self, index: int) -> MatchCandidate:
        if not 0 <= index < len(self.candidates):
            raise ValidationError(
                f"Candidate index {index} out of range (0..{len(self.candidates) - 1})"
            )
        return self.candidates[index]

    def with_candidate(
        self,
        index: int,
        candidate: MatchCandidate,
        *,
        pool: tuple[ExternalUser, ...] | None = None,
    ) -> ReconciliationSnapshot:
        self.candidate_at(index)
        candidates = (*self.candidates[:index], candidate, *self.candidates[index + 1 :])
        return ReconciliationSnapshot(
            candidates=candidates,
            pool=self.pool if pool is None else pool,
        )

    def pool_user(self, external_user_id: int) -> ExternalUser | None:
        for user in self.pool:
            if user.id == external_user_id:
                return user
        return None
