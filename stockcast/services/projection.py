from __future__ import annotations

from stockcast.core.projection.domain import IncomingStockEntry, ProjectionInput, ProjectionResult
from stockcast.core.projection.engine import run_projection
from stockcast.schemas.projection import IncomingStockItem, ProjectionRequest


def to_incoming_entries(items: list[IncomingStockItem]) -> list[IncomingStockEntry]:
    return [
        IncomingStockEntry(delivery_date=item.expected_date, quantity=item.quantity)
        for item in items
    ]


def run_projection_request(request: ProjectionRequest) -> ProjectionResult:
    """Run the engine for an HTTP projection request."""

    projection_input = ProjectionInput(
        current_inventory=request.current_inventory,
        avg_daily_sales=request.avg_daily_sales,
        monthly_growth_rate=request.monthly_growth_rate,
        lead_time_days=request.lead_time_days,
        incoming_stock=to_incoming_entries(request.incoming_stock),
        projection_days=request.projection_days,
    )

    return run_projection(
        projection_input,
        today=request.today,
        warning_threshold_days=request.warning_threshold_days,
    )
