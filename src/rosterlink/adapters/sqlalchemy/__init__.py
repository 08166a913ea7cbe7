"""SQLAlchemy adapter package for rosterlink."""

from __future__ import annotations

from .repositories import SqlAlchemyActivityRecorder, SqlAlchemyMemberRepository
from .tables import activity_log_table, metadata, team_member_table
from .unit_of_work import (
    SqlAlchemyReconciliationUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyActivityRecorder",
    "SqlAlchemyMemberRepository",
    "SqlAlchemyReconciliationUnitOfWork",
    "StartupError",
    "activity_log_table",
    "metadata",
    "shutdown",
    "startup",
    "team_member_table",
]
