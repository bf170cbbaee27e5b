from __future__ import annotations

from stockcast.core.projection.domain import (
    DEFAULT_PROJECTION_DAYS,
    DailyProjectionPoint,
    ProjectionResult,
    ReorderUrgency,
)
from stockcast.schemas.projection import (
    DailyProjectionPointSchema,
    ProjectionReportResponse,
    ProjectionResponse,
    ProjectionTableRow,
)


CHART_DAYS_AFTER_STOCK_OUT = 30
CHART_DAYS_WITHOUT_STOCK_OUT = 180
TABLE_SAMPLE_EVERY_DAYS = 7
TABLE_MAX_ROWS = 53


def chart_window(result: ProjectionResult) -> list[DailyProjectionPoint]:
    """Points worth charting: a month past the stock-out, or half a year."""

    points = result.daily_projection
    if result.days_until_stock_out is not None:
        max_days = min(result.days_until_stock_out + CHART_DAYS_AFTER_STOCK_OUT, len(points))
    else:
        max_days = min(CHART_DAYS_WITHOUT_STOCK_OUT, len(points))
    return points[:max_days]


def weekly_table(result: ProjectionResult) -> list[ProjectionTableRow]:
    """Sample every 7th day plus the final day of the projection."""

    points = result.daily_projection
    last_index = len(points) - 1
    sampled = [
        point
        for index, point in enumerate(points)
        if index % TABLE_SAMPLE_EVERY_DAYS == 0 or index == last_index
    ]

    return [
        ProjectionTableRow(
            date=point.date,
            inventory=point.inventory,
            incoming_stock=point.incoming_stock if point.incoming_stock > 0 else None,
            daily_sales=point.daily_sales,
        )
        for point in sampled[:TABLE_MAX_ROWS]
    ]


def risk_label(urgency: ReorderUrgency, days_until_stock_out: int | None) -> str:
    if urgency == ReorderUrgency.CRITICAL:
        if days_until_stock_out is not None and days_until_stock_out <= 0:
            return "Out of Stock"
        return "Reorder Now"
    if urgency == ReorderUrgency.WARNING:
        return "Reorder Soon"
    if days_until_stock_out is None:
        return "Well Stocked"
    return "OK"


def format_days_until_stock_out(
    days_until_stock_out: int | None,
    horizon_days: int = DEFAULT_PROJECTION_DAYS,
) -> str:
    if days_until_stock_out is None:
        return f"{horizon_days}+"
    return str(days_until_stock_out)


def build_projection_report(result: ProjectionResult) -> ProjectionReportResponse:
    horizon_days = len(result.daily_projection)

    return ProjectionReportResponse(
        projection=ProjectionResponse.model_validate(result),
        chart=[DailyProjectionPointSchema.model_validate(p) for p in chart_window(result)],
        weekly_table=weekly_table(result),
        risk_label=risk_label(result.reorder_urgency, result.days_until_stock_out),
        days_until_stock_out_display=format_days_until_stock_out(
            result.days_until_stock_out,
            horizon_days,
        ),
    )
