"""Name similarity heuristics used by the fuzzy matching rule.

The score is deliberately loose and tuned for short human names: exact match,
then containment ("Chef Steve" vs "Steve"), then an order-insensitive character
overlap ratio. It is not an edit distance.
"""

from __future__ import annotations

import math

from .normalize import normalize

EXACT_SCORE = 100
CONTAINMENT_SCORE = 75


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def similarity(a: str | None, b: str | None) -> int:
    """Return a 0-100 similarity score between two strings."""

    na = normalize(a)
    nb = normalize(b)
    if not na or not nb:
        return 0
    if na == nb:
        return EXACT_SCORE
    if na in nb or nb in na:
        return CONTAINMENT_SCORE
    return _overlap_score(na, nb)


def _overlap_score(na: str, nb: str) -> int:
    # equal lengths: pick roles by value so the score does not depend on argument order
    if len(na) == len(nb):
        shorter, longer = sorted((na, nb))
    elif len(na) < len(nb):
        shorter, longer = na, nb
    else:
        shorter, longer = nb, na
    available = set(longer)
    matches = sum(1 for char in shorter if char in available)
    return round_half_up(100 * matches / len(longer))


def combined_name_score(
    member_first: str | None,
    member_last: str | None,
    other_first: str | None,
    other_last: str | None,
) -> float:
    """Weighted first/last name similarity (last name weighs more)."""

    return 0.4 * similarity(member_first, other_first) + 0.6 * similarity(member_last, other_last)
