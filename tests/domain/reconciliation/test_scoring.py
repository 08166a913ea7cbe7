from __future__ import annotations

import itertools

import pytest

from rosterlink.domain.reconciliation.scoring import (
    combined_name_score,
    round_half_up,
    similarity,
)

NAMES = ["Steve", "Chef Steve", "Popp", "Pop", "Marcus", "Marco", "abc", "bca", "ab", "ba", "", "x"]


def test_similarity_of_equal_strings_is_100() -> None:
    assert similarity("Marcus", "marcus ") == 100


def test_similarity_with_empty_side_is_zero() -> None:
    assert similarity("", "x") == 0
    assert similarity("x", None) == 0
    assert similarity("   ", "   ") == 0


def test_similarity_containment_scores_75() -> None:
    assert similarity("Steve", "Chef Steve") == 75
    assert similarity("Chef Steve", "Steve") == 75


def test_similarity_character_overlap() -> None:
    # "marco" vs "marcus": m, a, r, c present -> 4 / 6
    assert similarity("Marco", "Marcus") == 67
    assert similarity("abc", "xyz") == 0


def test_similarity_overlap_counts_repeated_characters_of_shorter() -> None:
    # every character of "aab" occurs in "abb"
    assert similarity("aab", "abb") == 100


@pytest.mark.parametrize(("a", "b"), list(itertools.product(NAMES, repeat=2)))
def test_similarity_is_symmetric(a: str, b: str) -> None:
    assert similarity(a, b) == similarity(b, a)


@pytest.mark.parametrize(("a", "b"), list(itertools.product(NAMES, repeat=2)))
def test_similarity_is_bounded(a: str, b: str) -> None:
    assert 0 <= similarity(a, b) <= 100


def test_round_half_up() -> None:
    assert round_half_up(62.5) == 63
    assert round_half_up(89.5) == 90
    assert round_half_up(89.4) == 89


def test_combined_name_score_weights_last_name_more() -> None:
    assert combined_name_score("Steve", "Popp", "Chef Steve", "Popp") == pytest.approx(90.0)
    assert combined_name_score("Zed", "Popp", "Amy", "Popp") == pytest.approx(60.0)
