from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from stockcast.core.projection.domain import (
    DEFAULT_PROJECTION_DAYS,
    DEFAULT_WARNING_THRESHOLD_DAYS,
    MAX_LEAD_TIME_DAYS,
    ReorderUrgency,
)


class IncomingStockItem(BaseModel):
    expected_date: dt.date
    quantity: float = Field(..., gt=0, allow_inf_nan=False)
    note: str | None = None


class ProjectionRequest(BaseModel):
    """Engine input as accepted over HTTP.

    ``today`` pins the simulation start date; when omitted the server's
    current date is used.
    """

    current_inventory: float = Field(..., allow_inf_nan=False)
    avg_daily_sales: float = Field(..., ge=0, allow_inf_nan=False)
    monthly_growth_rate: float = Field(..., gt=0, allow_inf_nan=False)
    lead_time_days: int = Field(..., ge=0, le=MAX_LEAD_TIME_DAYS)
    incoming_stock: list[IncomingStockItem] = Field(default_factory=list)
    projection_days: int = Field(DEFAULT_PROJECTION_DAYS, ge=1, le=3650)
    today: dt.date | None = None
    warning_threshold_days: int = Field(DEFAULT_WARNING_THRESHOLD_DAYS, ge=0)


class DailyProjectionPointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: int
    date: dt.date
    inventory: float
    daily_sales: float
    incoming_stock: float


class ProjectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stock_out_date: dt.date | None
    days_until_stock_out: int | None
    must_reorder_by: dt.date | None
    reorder_urgency: ReorderUrgency
    daily_projection: list[DailyProjectionPointSchema]


class ProjectionTableRow(BaseModel):
    date: dt.date
    inventory: float
    incoming_stock: float | None
    daily_sales: float


class ProjectionReportResponse(BaseModel):
    projection: ProjectionResponse
    chart: list[DailyProjectionPointSchema]
    weekly_table: list[ProjectionTableRow]
    risk_label: str
    days_until_stock_out_display: str
