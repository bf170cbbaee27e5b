from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from stockcast.core.projection.domain import ReorderUrgency
from stockcast.schemas.projection import IncomingStockItem, ProjectionReportResponse
from stockcast.schemas.projection_settings import (
    EffectiveProjectionSettings,
    ProductSettingsOverride,
    ShopSettings,
)


class ProductSnapshot(BaseModel):
    """Product state gathered by the caller.

    ``avg_daily_sales`` is expected to be aggregated upstream over the
    product's sale range.
    """

    product_id: str
    title: str
    vendor: str = ""
    total_inventory: float = Field(..., allow_inf_nan=False)
    avg_daily_sales: float = Field(0.0, ge=0, allow_inf_nan=False)
    settings: ProductSettingsOverride | None = None
    incoming_stock: list[IncomingStockItem] = Field(default_factory=list)


class ProductForecastRequest(BaseModel):
    shop: ShopSettings = Field(default_factory=ShopSettings)
    product: ProductSnapshot
    today: dt.date | None = None


class ProductForecastDetailResponse(BaseModel):
    product_id: str
    title: str
    vendor: str
    total_inventory: float
    avg_daily_sales: float
    settings: EffectiveProjectionSettings
    report: ProjectionReportResponse


class ProductForecastRow(BaseModel):
    product_id: str
    title: str
    vendor: str
    total_inventory: float
    avg_daily_sales: float
    days_until_stock_out: int | None
    stock_out_date: dt.date | None
    must_reorder_by: dt.date | None
    reorder_urgency: ReorderUrgency
    risk_label: str
    days_until_stock_out_display: str


class SkippedProduct(BaseModel):
    product_id: str
    title: str
    reason: str


class ForecastPortfolioRequest(BaseModel):
    shop: ShopSettings = Field(default_factory=ShopSettings)
    products: list[ProductSnapshot]
    today: dt.date | None = None
    search: str | None = None
    vendor: str | None = None


class ForecastPortfolioResponse(BaseModel):
    items: list[ProductForecastRow]
    skipped: list[SkippedProduct]
    total_products: int
    critical_count: int
    warning_count: int
    at_risk_count: int
    vendors: list[str]
