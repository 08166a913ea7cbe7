"""Error taxonomy for the reconciliation core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ReconciliationError(Exception):
    """Base class for every error raised by the reconciliation core."""


class UnknownFieldError(ReconciliationError, ValueError):
    """Raised when a record mapping carries fields the domain does not know."""

    def __init__(self, record: str, fields: Iterable[str]) -> None:
        self.record = record
        self.fields = tuple(sorted(fields))
        super().__init__(f"Unknown fields for {record}: {', '.join(self.fields)}")


class FetchError(ReconciliationError):
    """An input source failed to return data; the preview is aborted."""

    retryable = True


class ValidationError(ReconciliationError):
    """An operator operation violated the candidate contract."""


class PartialDataError(ReconciliationError):
    """Supplementary row data (wages) could not be fetched for one candidate."""

    def __init__(self, message: str, *, external_user_id: int) -> None:
        super().__init__(message)
        self.external_user_id = external_user_id


class PersistenceError(ReconciliationError):
    """Writing one confirmed link to the member store failed."""

    retryable = True


class MemberNotFoundError(PersistenceError):
    """The member row targeted by a link write no longer exists."""

    def __init__(self, member_id: str) -> None:
        super().__init__(f"Team member {member_id} not found")
        self.member_id = member_id


class StaleMemberError(PersistenceError):
    """The member row changed since the preview that produced the candidate."""

    def __init__(self, member_id: str) -> None:
        super().__init__(f"Team member {member_id} was modified by another writer")
        self.member_id = member_id


class SaveInProgressError(ReconciliationError):
    """Another save is already running for the same organization."""

    def __init__(self, organization_id: str) -> None:
        super().__init__(f"A save is already in progress for organization {organization_id}")
        self.organization_id = organization_id
