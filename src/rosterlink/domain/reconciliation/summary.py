"""Counts shown above the candidate list."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rosterlink.domain.model import MatchType

if TYPE_CHECKING:
    from .candidates import ReconciliationSnapshot


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchSummary:
    linked: int = 0
    exact: int = 0
    suggested: int = 0
    manual: int = 0
    unmatched: int = 0
    pending_save: int = 0
    unclaimed_external_users: int = 0

    @property
    def total(self) -> int:
        return self.linked + self.exact + self.suggested + self.manual + self.unmatched


def summarize(snapshot: ReconciliationSnapshot) -> MatchSummary:
    counts = Counter(candidate.match_type for candidate in snapshot)
    return MatchSummary(
        linked=counts[MatchType.LINKED],
        exact=counts[MatchType.EXACT],
        suggested=counts[MatchType.SUGGESTED],
        manual=counts[MatchType.MANUAL],
        unmatched=counts[MatchType.UNMATCHED],
        pending_save=sum(1 for candidate in snapshot if candidate.is_pending_save),
        unclaimed_external_users=len(snapshot.pool),
    )
