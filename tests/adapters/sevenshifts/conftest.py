from __future__ import annotations

import pytest

from rosterlink.config import ResilienceConfig, RetryPolicy, SevenShiftsConfig

BASE_URL = "https://api.7shifts.test/v2/"


@pytest.fixture
def sevenshifts_config() -> SevenShiftsConfig:
    return SevenShiftsConfig(
        access_token="token-123",
        company_id=99,
        resilience=ResilienceConfig(
            name="7shifts-test",
            base_url=BASE_URL,
            retry=RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0),
            cache=None,
        ),
    )


@pytest.fixture
def user_payloads() -> list[dict[str, object]]:
    return [
        {
            "id": 1,
            "first_name": "Marcus",
            "last_name": "Chen",
            "email": "marcus@x.com",
            "mobile_phone": "",
            "punch_id": 42,
            "hire_date": "2020-01-01",
            "status": "active",
            "type": "employee",
            "invite_status": "accepted",
        },
        {
            "id": 2,
            "first_name": "Chef Steve",
            "last_name": "Popp",
            "email": None,
            "type": "manager",
        },
    ]
