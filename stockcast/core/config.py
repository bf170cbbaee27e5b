from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ShopDefaults:
    """Shop-level projection defaults used when a request omits them."""

    lead_time_days: int = 84
    sale_range_days: int = 90
    monthly_growth_rate: float = 1.1
    alert_threshold_days: int = 14
    projection_days: int = 365
    log_level: str = "WARNING"


def _env(name: str, default: T, parse: Callable[[str], T]) -> T:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw.strip())
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using default %r", name, raw, default)
        return default


def _finite_float(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"{raw!r} is not a finite number")
    return value


def _log_level(raw: str) -> str:
    level = raw.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"unknown log level {raw!r}")
    return level


@lru_cache(maxsize=1)
def get_shop_defaults() -> ShopDefaults:
    """Read shop defaults from STOCKCAST_* environment variables.

    Cached per process; call ``get_shop_defaults.cache_clear()`` after
    changing the environment.
    """

    base = ShopDefaults()
    return ShopDefaults(
        lead_time_days=_env("STOCKCAST_LEAD_TIME_DAYS", base.lead_time_days, int),
        sale_range_days=_env("STOCKCAST_SALE_RANGE_DAYS", base.sale_range_days, int),
        monthly_growth_rate=_env(
            "STOCKCAST_MONTHLY_GROWTH_RATE", base.monthly_growth_rate, _finite_float
        ),
        alert_threshold_days=_env(
            "STOCKCAST_ALERT_THRESHOLD_DAYS", base.alert_threshold_days, int
        ),
        projection_days=_env("STOCKCAST_PROJECTION_DAYS", base.projection_days, int),
        log_level=_env("STOCKCAST_LOG_LEVEL", base.log_level, _log_level),
    )
