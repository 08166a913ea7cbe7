"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_int_env, parse_int, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .reconciliation import ReconciliationConfig, get_reconciliation_config
from .sevenshifts import SevenShiftsConfig, get_sevenshifts_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ReconciliationConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "SevenShiftsConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_reconciliation_config",
    "get_sevenshifts_config",
    "get_storage_config",
    "optional_int_env",
    "parse_int",
    "require_env_var",
    "require_env_vars",
]
