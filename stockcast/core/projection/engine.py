"""Day-by-day inventory projection.

The engine compounds sales growth, merges scheduled deliveries and finds the
first day inventory runs out. It reads no external state apart from the
current date, and only when the caller does not pass ``today`` explicitly.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, Optional, Union

from stockcast.core.projection.domain import (
    CRITICAL_THRESHOLD_DAYS,
    DAYS_PER_MONTH,
    DEFAULT_WARNING_THRESHOLD_DAYS,
    DailyProjectionPoint,
    IncomingStockEntry,
    ProjectionInput,
    ProjectionInputError,
    ProjectionResult,
    ReorderUrgency,
)


def _as_calendar_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def round_for_display(value: float) -> float:
    """Round to cents, halves away from zero for positive values."""

    scaled = value * 100
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / 100


def daily_growth_rate(monthly_growth_rate: float) -> float:
    """Convert a monthly sales multiplier into a per-day multiplier."""

    if not (math.isfinite(monthly_growth_rate) and monthly_growth_rate > 0):
        raise ProjectionInputError(
            f"monthly_growth_rate must be > 0 and finite, got {monthly_growth_rate}"
        )
    return monthly_growth_rate ** (1.0 / DAYS_PER_MONTH)


def bucket_incoming_stock(
    entries: Iterable[IncomingStockEntry],
    today: date,
) -> Dict[int, float]:
    """Sum incoming quantities by day offset from ``today``.

    Deliveries dated before today are dropped.
    """

    incoming_by_day: Dict[int, float] = {}
    for entry in entries:
        offset = (_as_calendar_date(entry.delivery_date) - today).days
        if offset < 0:
            continue
        incoming_by_day[offset] = incoming_by_day.get(offset, 0.0) + entry.quantity
    return incoming_by_day


def classify_urgency(
    days_until_stock_out: Optional[int],
    lead_time_days: int,
    warning_threshold_days: int = DEFAULT_WARNING_THRESHOLD_DAYS,
) -> ReorderUrgency:
    if days_until_stock_out is None:
        return ReorderUrgency.OK

    reorder_day = days_until_stock_out - lead_time_days
    if reorder_day <= CRITICAL_THRESHOLD_DAYS:
        return ReorderUrgency.CRITICAL
    if reorder_day <= warning_threshold_days:
        return ReorderUrgency.WARNING
    return ReorderUrgency.OK


def run_projection(
    projection_input: ProjectionInput,
    today: Optional[Union[date, datetime]] = None,
    warning_threshold_days: int = DEFAULT_WARNING_THRESHOLD_DAYS,
) -> ProjectionResult:
    """Simulate inventory day by day and derive the reorder deadline.

    Each day first receives its scheduled deliveries, then is checked for
    stock-out, then loses that day's sales. Sales grow from day 1 onwards;
    day 0 uses ``avg_daily_sales`` as given. Values in the returned points are
    rounded for display, while the running totals keep full precision.
    """

    if projection_input.projection_days < 1:
        raise ProjectionInputError(
            f"projection_days must be >= 1, got {projection_input.projection_days}"
        )
    if warning_threshold_days < 0:
        raise ProjectionInputError(
            f"warning_threshold_days must be >= 0, got {warning_threshold_days}"
        )

    for name in ("current_inventory", "avg_daily_sales"):
        value = getattr(projection_input, name)
        if not math.isfinite(value):
            raise ProjectionInputError(f"{name} must be finite, got {value}")

    growth = daily_growth_rate(projection_input.monthly_growth_rate)
    start = _as_calendar_date(today) if today is not None else date.today()
    try:
        start + timedelta(days=projection_input.projection_days - 1)
    except OverflowError as exc:
        raise ProjectionInputError(
            f"projection of {projection_input.projection_days} days from {start} "
            "runs past the last representable date"
        ) from exc
    incoming_by_day = bucket_incoming_stock(projection_input.incoming_stock, start)

    inventory = float(projection_input.current_inventory)
    daily_sales = float(projection_input.avg_daily_sales)
    days_until_stock_out: Optional[int] = None
    points: list[DailyProjectionPoint] = []

    for day in range(projection_input.projection_days):
        incoming = incoming_by_day.get(day, 0)
        inventory += incoming

        points.append(
            DailyProjectionPoint(
                day=day,
                date=start + timedelta(days=day),
                inventory=max(0.0, round_for_display(inventory)),
                daily_sales=round_for_display(daily_sales),
                incoming_stock=incoming,
            )
        )

        if inventory <= 0 and days_until_stock_out is None:
            days_until_stock_out = day

        inventory -= daily_sales

        if day > 0:
            daily_sales *= growth

    stock_out_date: Optional[date] = None
    must_reorder_by: Optional[date] = None
    if days_until_stock_out is not None:
        stock_out_date = start + timedelta(days=days_until_stock_out)
        try:
            must_reorder_by = stock_out_date - timedelta(days=projection_input.lead_time_days)
        except OverflowError as exc:
            raise ProjectionInputError(
                f"lead_time_days={projection_input.lead_time_days} puts the reorder date "
                "outside the representable date range"
            ) from exc

    return ProjectionResult(
        stock_out_date=stock_out_date,
        days_until_stock_out=days_until_stock_out,
        must_reorder_by=must_reorder_by,
        reorder_urgency=classify_urgency(
            days_until_stock_out,
            projection_input.lead_time_days,
            warning_threshold_days,
        ),
        daily_projection=points,
    )
