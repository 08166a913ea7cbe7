"""Async HTTP client shared by provider adapters.

Retries come from ``httpx-retries``, client-side rate limiting from
``aiolimiter`` and optional response caching from ``hishel``. Everything is
configured through :class:`rosterlink.config.ResilienceConfig`.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from rosterlink.config.storage import get_storage_config

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from rosterlink.config.http_resilience import CacheConfig, ResilienceConfig, RetryPolicy

log = getLogger(__name__)

THROTTLED_STATUS_CODES = frozenset({429, 503})


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


def build_cache_storage(config: CacheConfig | None) -> AsyncSqliteStorage | None:
    """Return hishel storage for ``config`` or ``None`` when caching is off."""

    if config is None or not config.enabled:
        return None
    if config.backend == "sqlite":
        database_path = config.sqlite_path or str(get_storage_config().http_cache_path())
    elif config.backend == "memory":
        database_path = ":memory:"
    else:
        raise ValueError(f"Unsupported cache backend: {config.backend}")
    return AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=config.default_ttl_seconds,
        refresh_ttl_on_access=config.refresh_ttl_on_access,
    )


class ResilientClient:
    """Async HTTP client with retries, client-side rate limiting and optional caching.

    ``transport`` replaces the network layer underneath the retry transport,
    which is how tests plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )

        client_kwargs: dict[str, Any] = {
            "timeout": config.timeout_seconds,
            "transport": RetryTransport(transport=transport, retry=build_retry(config.retry)),
            "event_hooks": {"response": [self._log_throttling, *config.response_hooks]},
        }
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url
        if config.default_headers:
            client_kwargs["headers"] = dict(config.default_headers)

        storage = build_cache_storage(config.cache)
        if storage is not None:
            self._client: httpx.AsyncClient = AsyncCacheClient(**client_kwargs, storage=storage)
        else:
            self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: httpx.URL | str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        if self._limiter is None:
            return await self._client.request(method, url, params=params, headers=headers)
        if not self._limiter.has_capacity():
            log.debug("%s: client-side rate limit reached, waiting", self.config.name)
        async with self._limiter:
            return await self._client.request(method, url, params=params, headers=headers)

    async def get(
        self,
        url: httpx.URL | str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("GET", url, params=params, headers=headers)

    async def _log_throttling(self, response: httpx.Response) -> None:
        if response.status_code in THROTTLED_STATUS_CODES:
            log.warning(
                "%s: %s %s still throttled after retries (HTTP %s, Retry-After=%s)",
                self.config.name,
                response.request.method,
                response.request.url.path,
                response.status_code,
                response.headers.get("Retry-After", "-"),
            )
