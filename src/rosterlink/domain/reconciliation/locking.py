"""Single-flight guard for saves within one organization."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rosterlink.domain.errors import SaveInProgressError

if TYPE_CHECKING:
    from collections.abc import Iterator


class OrganizationLocks:
    """Refuse overlapping saves for the same organization instead of queueing them."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._held: set[str] = set()

    def is_held(self, organization_id: str) -> bool:
        with self._guard:
            return organization_id in self._held

    @contextmanager
    def hold(self, organization_id: str) -> Iterator[None]:
        with self._guard:
            if organization_id in self._held:
                raise SaveInProgressError(organization_id)
            self._held.add(organization_id)
        try:
            yield
        finally:
            with self._guard:
                self._held.discard(organization_id)
