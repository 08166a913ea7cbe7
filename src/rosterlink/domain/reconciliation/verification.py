"""Three-step operator attestation (identity, roles, wages).

Flags only change through explicit operator toggles; nothing here looks at
provider data. Linked candidates start fully verified because the link was
attested in an earlier session.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from rosterlink.domain.errors import ValidationError
from rosterlink.domain.model import VerificationStep

if TYPE_CHECKING:
    from .candidates import MatchCandidate, ReconciliationSnapshot


def is_fully_verified(candidate: MatchCandidate) -> bool:
    return candidate.verified.is_complete


def verified_step_count(candidate: MatchCandidate) -> int:
    return candidate.verified.step_count


def toggle_verification(
    snapshot: ReconciliationSnapshot,
    index: int,
    step: VerificationStep | str,
) -> ReconciliationSnapshot:
    """Flip exactly one verification flag of the candidate at ``index``."""

    candidate = snapshot.candidate_at(index)
    if not candidate.is_matched:
        raise ValidationError(f"Candidate {index} has no provider user to verify")
    try:
        resolved_step = VerificationStep(step)
    except ValueError as exc:
        raise ValidationError(f"Unknown verification step: {step!r}") from exc

    updated = replace(candidate, verified=candidate.verified.toggled(resolved_step))
    return snapshot.with_candidate(index, updated)
