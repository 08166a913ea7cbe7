"""7shifts API configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import parse_int, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

SEVENSHIFTS_BASE_URL = "https://api.7shifts.com/v2/"
SEVENSHIFTS_TIMEOUT_SECONDS = 15.0
# documented API limit
SEVENSHIFTS_RATE_LIMIT = RateLimit(max_calls=10, per_seconds=1.0)
# in-process only; dedupes repeated row expansions within one session
CACHE_TTL_SECONDS = 60.0


@dataclass(frozen=True)
class SevenShiftsConfig:
    """Holds 7shifts API credentials and client settings."""

    access_token: str
    company_id: int
    resilience: ResilienceConfig


def get_sevenshifts_config(
    *,
    resilience: ResilienceConfig | None = None,
) -> SevenShiftsConfig:
    values = require_env_vars(("SEVENSHIFTS_ACCESS_TOKEN", "SEVENSHIFTS_COMPANY_ID"))
    company_id = parse_int("SEVENSHIFTS_COMPANY_ID", values["SEVENSHIFTS_COMPANY_ID"], minimum=1)
    base_url = os.getenv("SEVENSHIFTS_BASE_URL") or SEVENSHIFTS_BASE_URL
    return SevenShiftsConfig(
        access_token=values["SEVENSHIFTS_ACCESS_TOKEN"],
        company_id=company_id,
        resilience=resilience
        or ResilienceConfig(
            name="7shifts",
            base_url=base_url,
            timeout_seconds=SEVENSHIFTS_TIMEOUT_SECONDS,
            ratelimit=SEVENSHIFTS_RATE_LIMIT,
            cache=CacheConfig(backend="memory", default_ttl_seconds=CACHE_TTL_SECONDS),
        ),
    )
