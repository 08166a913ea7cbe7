"""Employee record reconciliation: match, verify, override and persist links."""

from __future__ import annotations

from .candidates import MatchCandidate, ReconciliationSnapshot, Verification
from .engine import SUGGESTION_THRESHOLD, build_matches, member_sort_key
from .locking import OrganizationLocks
from .normalize import normalize
from .override import manual_assign, unlink_match
from .persist import SaveFailure, SaveResult, pending_indices, save_matches
from .pool import CandidatePool
from .scoring import combined_name_score, similarity
from .summary import MatchSummary, summarize
from .verification import is_fully_verified, toggle_verification, verified_step_count
from .wages import WageLookup

__all__ = [
    "SUGGESTION_THRESHOLD",
    "CandidatePool",
    "MatchCandidate",
    "MatchSummary",
    "OrganizationLocks",
    "ReconciliationSnapshot",
    "SaveFailure",
    "SaveResult",
    "Verification",
    "WageLookup",
    "build_matches",
    "combined_name_score",
    "is_fully_verified",
    "manual_assign",
    "member_sort_key",
    "normalize",
    "pending_indices",
    "save_matches",
    "similarity",
    "summarize",
    "toggle_verification",
    "unlink_match",
    "verified_step_count",
]
