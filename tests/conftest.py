from __future__ import annotations

from datetime import date
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from stockcast.core.config import get_shop_defaults
from stockcast.main import app


@pytest.fixture(autouse=True)
def clean_stockcast_env(monkeypatch) -> Generator[None, None, None]:
    """Drop STOCKCAST_* variables so each test starts from built-in defaults."""
    for name in (
        "STOCKCAST_LEAD_TIME_DAYS",
        "STOCKCAST_SALE_RANGE_DAYS",
        "STOCKCAST_MONTHLY_GROWTH_RATE",
        "STOCKCAST_ALERT_THRESHOLD_DAYS",
        "STOCKCAST_PROJECTION_DAYS",
        "STOCKCAST_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_shop_defaults.cache_clear()
    try:
        yield
    finally:
        get_shop_defaults.cache_clear()


@pytest.fixture
def today() -> date:
    return date(2025, 1, 1)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c
