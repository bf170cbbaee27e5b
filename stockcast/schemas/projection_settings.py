from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from stockcast.core.projection.domain import MAX_LEAD_TIME_DAYS


class SettingsSource(str, Enum):
    PRODUCT = "product"
    SHOP = "shop"
    DEFAULT = "default"


class ShopSettings(BaseModel):
    """Shop-wide projection settings; unset fields use configured defaults."""

    lead_time_days: int | None = Field(None, ge=0, le=MAX_LEAD_TIME_DAYS)
    sale_range_days: int | None = Field(None, ge=1)
    monthly_growth_rate: float | None = Field(None, gt=0, allow_inf_nan=False)
    alert_threshold_days: int | None = Field(None, ge=0)


class ProductSettingsOverride(BaseModel):
    lead_time_days: int | None = Field(None, ge=0, le=MAX_LEAD_TIME_DAYS)
    sale_range_days: int | None = Field(None, ge=1)
    monthly_growth_rate: float | None = Field(None, gt=0, allow_inf_nan=False)


class EffectiveProjectionSettings(BaseModel):
    """Settings after product > shop > default resolution.

    ``sale_range_days`` is not read by the projection engine. It is passed
    through so the caller's sales aggregator knows which window
    ``avg_daily_sales`` should be averaged over.
    """

    lead_time_days: int
    sale_range_days: int
    monthly_growth_rate: float
    alert_threshold_days: int
    sources: dict[str, SettingsSource]
    explanation: str | None = None
