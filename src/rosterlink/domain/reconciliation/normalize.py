"""Canonical form for free-text names and e-mail addresses."""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")


def normalize(value: str | None) -> str:
    """Lower-case, trim and collapse whitespace runs to a single space.

    ``None`` and blank input normalize to ``""``.
    """

    if not value:
        return ""
    return _WHITESPACE.sub(" ", value.lower()).strip()


def full_name_key(first_name: str | None, last_name: str | None) -> str:
    return normalize(f"{first_name or ''} {last_name or ''}")
