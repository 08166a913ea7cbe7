from __future__ import annotations

import pytest

from rosterlink.domain.reconciliation.normalize import full_name_key, normalize


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("  Marcus   Chen ", "marcus chen"),
        ("MARCUS\tCHEN", "marcus chen"),
        ("Chef\n  Steve", "chef steve"),
        ("", ""),
        ("   ", ""),
        (None, ""),
    ],
)
def test_normalize_lowercases_trims_and_collapses(raw: str | None, expected: str) -> None:
    assert normalize(raw) == expected


@pytest.mark.parametrize("raw", ["  A  b ", "Ünïcode   Name", "x", "", "Mixed\t \nWhitespace  "])
def test_normalize_is_idempotent(raw: str) -> None:
    assert normalize(normalize(raw)) == normalize(raw)


def test_full_name_key_tolerates_missing_parts() -> None:
    assert full_name_key("Marcus", "Chen") == "marcus chen"
    assert full_name_key(None, "Chen") == "chen"
    assert full_name_key("Marcus", None) == "marcus"
    assert full_name_key(None, None) == ""
