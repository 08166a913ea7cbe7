from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any

import httpx
import pytest
from hishel import AsyncSqliteStorage

from rosterlink.adapters.http_resilience import ResilientClient, build_cache_storage
from rosterlink.config import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

BASE_CONFIG = ResilienceConfig(
    name="test-api",
    base_url="https://api.example.test/",
    retry=RetryPolicy(total=0, backoff_factor=0.0, backoff_jitter=0.0),
)


def _config(**overrides: Any) -> ResilienceConfig:
    return replace(BASE_CONFIG, **overrides)


def test_cache_storage_disabled_without_config() -> None:
    assert build_cache_storage(None) is None
    assert build_cache_storage(CacheConfig(enabled=False)) is None


def test_memory_cache_builds_sqlite_storage() -> None:
    storage = build_cache_storage(CacheConfig(backend="memory", default_ttl_seconds=60))

    assert isinstance(storage, AsyncSqliteStorage)


def test_requests_carry_default_headers_and_pass_rate_limiter() -> None:
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    config = _config(
        default_headers={"Authorization": "Bearer abc"},
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
    )

    async def scenario() -> list[int]:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            responses = [await client.get("things", params={"page": "1"}) for _ in range(2)]
        return [response.status_code for response in responses]

    assert asyncio.run(scenario()) == [200, 200]
    assert [request.url.path for request in seen] == ["/things", "/things"]
    assert seen[0].headers["Authorization"] == "Bearer abc"
    assert seen[0].url.params["page"] == "1"


def test_throttled_response_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        _ = request
        return httpx.Response(429, headers={"Retry-After": "3"})

    async def scenario() -> int:
        async with ResilientClient(_config(), transport=httpx.MockTransport(handler)) as client:
            return (await client.get("things")).status_code

    with caplog.at_level(logging.WARNING, logger="rosterlink.adapters.http_resilience"):
        status = asyncio.run(scenario())

    assert status == 429
    assert "still throttled" in caplog.text
    assert "Retry-After=3" in caplog.text
