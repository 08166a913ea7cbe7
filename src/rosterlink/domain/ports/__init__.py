"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import ExternalUserSource, MemberSource, RoleSource, WageSource
from .persistence import ActivityEntry, ActivityRecorder, MemberLink, MemberRepository
from .unit_of_work import (
    ReconciliationRepositories,
    ReconciliationUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ActivityEntry",
    "ActivityRecorder",
    "ExternalUserSource",
    "MemberLink",
    "MemberRepository",
    "MemberSource",
    "ReconciliationRepositories",
    "ReconciliationUnitOfWork",
    "RepositoryCollection",
    "RoleSource",
    "UnitOfWork",
    "WageSource",
]
