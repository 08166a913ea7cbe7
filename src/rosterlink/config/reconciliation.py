"""Defaults for reconciliation sessions."""

from __future__ import annotations

from dataclasses import dataclass

from rosterlink.domain.model import Provider

from .env import optional_int_env

DEFAULT_WAGE_CONCURRENCY = 5


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    provider: Provider = Provider.SEVENSHIFTS
    wage_concurrency: int = DEFAULT_WAGE_CONCURRENCY


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig(
        wage_concurrency=optional_int_env(
            "ROSTERLINK_WAGE_CONCURRENCY",
            default=DEFAULT_WAGE_CONCURRENCY,
            minimum=1,
        )
    )
