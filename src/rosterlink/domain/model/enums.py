"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Provider(StrEnum):
    SEVENSHIFTS = "7shifts"


class MatchType(StrEnum):
    """How a team member was paired with a provider user during one run."""

    LINKED = "linked"
    EXACT = "exact"
    SUGGESTED = "suggested"
    MANUAL = "manual"
    UNMATCHED = "unmatched"


class VerificationStep(StrEnum):
    IDENTITY = "identity"
    ROLES = "roles"
    WAGES = "wages"


class WageType(StrEnum):
    HOURLY = "hourly"
    SALARY = "salary"
