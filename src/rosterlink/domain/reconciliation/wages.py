"""Lazy, bounded wage lookups for expanded candidate rows."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Self

from rosterlink.domain.errors import PartialDataError

if TYPE_CHECKING:
    from types import TracebackType

    from rosterlink.domain.model import WageSchedule
    from rosterlink.domain.ports import WageSource

log = getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 5


class WageLookup:
    """Fetch wage schedules on demand, at most ``max_concurrency`` at a time.

    Results and in-flight fetches are cached per provider user id so that
    expanding the same row twice costs one request. Failed fetches are not
    cached. ``close`` cancels everything still running.
    """

    def __init__(
        self,
        source: WageSource,
        organization_id: str,
        *,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._source = source
        self._organization_id = organization_id
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._tasks: dict[int, asyncio.Task[WageSchedule]] = {}
        self._closed = False

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def cached(self, external_user_id: int) -> WageSchedule | None:
        task = self._tasks.get(external_user_id)
        if task is None or not task.done() or task.cancelled() or task.exception():
            return None
        return task.result()

    async def get(self, external_user_id: int) -> WageSchedule:
        """Return the wage schedule of one provider user.

        Raises ``PartialDataError`` when the provider call fails.
        """

        if self._closed:
            raise RuntimeError("WageLookup is closed")
        task = self._tasks.get(external_user_id)
        if task is None:
            task = asyncio.create_task(
                self._fetch(external_user_id),
                name=f"wages-{external_user_id}",
            )
            self._tasks[external_user_id] = task
        try:
            return await asyncio.shield(task)
        except PartialDataError:
            if self._tasks.get(external_user_id) is task:
                del self._tasks[external_user_id]
            raise

    async def get_many(self, external_user_ids: list[int]) -> dict[int, WageSchedule | PartialDataError]:
        """Fetch several schedules; failures are returned per user instead of raised."""

        results = await asyncio.gather(
            *(self.get(user_id) for user_id in external_user_ids),
            return_exceptions=True,
        )
        outcome: dict[int, WageSchedule | PartialDataError] = {}
        for user_id, value in zip(external_user_ids, results, strict=True):
            if isinstance(value, BaseException) and not isinstance(value, PartialDataError):
                raise value
            outcome[user_id] = value
        return outcome

    async def close(self) -> None:
        self._closed = True
        pending = [task for task in self._tasks.values() if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            log.debug("Cancelled %s outstanding wage fetches", len(pending))
        self._tasks.clear()

    async def _fetch(self, external_user_id: int) -> WageSchedule:
        async with self._semaphore:
            try:
                return await self._source.list_wages(self._organization_id, external_user_id)
            except Exception as exc:
                log.warning("Wage lookup for external user %s failed: %s", external_user_id, exc)
                raise PartialDataError(
                    f"Wages unavailable for external user {external_user_id}",
                    external_user_id=external_user_id,
                ) from exc
