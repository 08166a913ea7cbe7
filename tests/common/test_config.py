from __future__ import annotations

import logging
from pathlib import Path

import pytest

from rosterlink.config import (
    ConfigurationError,
    MissingConfigurationError,
    configure_logging,
    get_database_config,
    get_reconciliation_config,
    get_sevenshifts_config,
    get_storage_config,
    require_env_var,
    require_env_vars,
)
from rosterlink.config.sevenshifts import CACHE_TTL_SECONDS, SEVENSHIFTS_BASE_URL


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_lists_all_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.delenv("MISSING_A", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_sevenshifts_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEVENSHIFTS_ACCESS_TOKEN", "secret")
    monkeypatch.setenv("SEVENSHIFTS_COMPANY_ID", " 1234 ")
    monkeypatch.delenv("SEVENSHIFTS_BASE_URL", raising=False)

    config = get_sevenshifts_config()

    assert config.access_token == "secret"
    assert config.company_id == 1234
    assert config.resilience.base_url == SEVENSHIFTS_BASE_URL
    assert config.resilience.ratelimit is not None
    assert config.resilience.cache is not None
    assert config.resilience.cache.backend == "memory"
    assert config.resilience.cache.default_ttl_seconds == CACHE_TTL_SECONDS
    assert "POST" not in config.resilience.retry.allowed_methods


def test_sevenshifts_config_rejects_non_numeric_company(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEVENSHIFTS_ACCESS_TOKEN", "secret")
    monkeypatch.setenv("SEVENSHIFTS_COMPANY_ID", "acme")

    with pytest.raises(ConfigurationError, match="SEVENSHIFTS_COMPANY_ID"):
        get_sevenshifts_config()


def test_sevenshifts_config_requires_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SEVENSHIFTS_ACCESS_TOKEN", raising=False)
    monkeypatch.setenv("SEVENSHIFTS_COMPANY_ID", "1")

    with pytest.raises(MissingConfigurationError, match="SEVENSHIFTS_ACCESS_TOKEN"):
        get_sevenshifts_config()


def test_storage_config_honours_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ROSTERLINK_DATA_DIR", str(tmp_path / "data"))

    storage = get_storage_config()

    assert storage.snapshot_path() == (tmp_path / "data" / "snapshot.json").resolve()
    assert (tmp_path / "data").is_dir()


def test_database_config_prefers_explicit_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"


def test_database_config_falls_back_to_data_dir(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("ROSTERLINK_DATA_DIR", str(tmp_path))

    uri = get_database_config().uri

    assert uri.startswith("sqlite+pysqlite:///")
    assert Path(uri.removeprefix("sqlite+pysqlite:///")).name == "rosterlink.db"


def test_reconciliation_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ROSTERLINK_WAGE_CONCURRENCY", raising=False)

    assert get_reconciliation_config().wage_concurrency == 5


@pytest.mark.parametrize("raw", ["zero", "0"])
def test_reconciliation_config_rejects_bad_concurrency(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
) -> None:
    monkeypatch.setenv("ROSTERLINK_WAGE_CONCURRENCY", raw)

    with pytest.raises(ConfigurationError):
        get_reconciliation_config()


def test_configure_logging_quiets_http_loggers() -> None:
    configure_logging(level=logging.INFO, force=True)

    assert logging.getLogger("httpx").level == logging.WARNING
