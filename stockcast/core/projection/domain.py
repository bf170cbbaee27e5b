from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Union


DEFAULT_PROJECTION_DAYS = 365
DAYS_PER_MONTH = 30
CRITICAL_THRESHOLD_DAYS = 0
DEFAULT_WARNING_THRESHOLD_DAYS = 14
MAX_LEAD_TIME_DAYS = 3650


class ProjectionInputError(ValueError):
    """Raised when projection input violates the engine contract."""


class ReorderUrgency(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    OK = "ok"


@dataclass(frozen=True)
class IncomingStockEntry:
    """A scheduled delivery that adds stock on a given calendar day."""

    delivery_date: Union[date, datetime]
    """Day the stock arrives. Datetimes are truncated to their calendar date."""

    quantity: float
    """Units added to inventory on that day."""


@dataclass(frozen=True)
class ProjectionInput:
    """Snapshot of product state used for a single projection run."""

    current_inventory: float
    """Units on hand at day 0."""

    avg_daily_sales: float
    """Baseline sales velocity at day 0."""

    monthly_growth_rate: float
    """Sales multiplier over a nominal 30-day month; must be > 0."""

    lead_time_days: int
    """Days between placing a reorder and receiving it."""

    incoming_stock: List[IncomingStockEntry] = field(default_factory=list)
    """Known future deliveries. Entries dated before today are ignored."""

    projection_days: int = DEFAULT_PROJECTION_DAYS
    """Number of simulated days."""


@dataclass(frozen=True)
class DailyProjectionPoint:
    day: int
    date: date
    inventory: float
    daily_sales: float
    incoming_stock: float


@dataclass(frozen=True)
class ProjectionResult:
    """Outcome of a projection run.

    Stock-out fields are None when inventory stays positive for the whole
    horizon; in that case urgency is always "ok".
    """

    stock_out_date: Optional[date]
    days_until_stock_out: Optional[int]
    must_reorder_by: Optional[date]
    reorder_urgency: ReorderUrgency
    daily_projection: List[DailyProjectionPoint]
