"""Public domain model surface."""

from __future__ import annotations

from rosterlink.domain.model.enums import MatchType, Provider, VerificationStep, WageType
from rosterlink.domain.model.records import (
    ExternalUser,
    InternalMember,
    Role,
    WageRecord,
    WageSchedule,
)

__all__ = [
    "ExternalUser",
    "InternalMember",
    "MatchType",
    "Provider",
    "Role",
    "VerificationStep",
    "WageRecord",
    "WageSchedule",
    "WageType",
]
