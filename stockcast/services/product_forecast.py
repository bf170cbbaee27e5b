from __future__ import annotations

import logging
from datetime import date

from stockcast.core.config import ShopDefaults, get_shop_defaults
from stockcast.core.projection.domain import ProjectionInput, ProjectionInputError, ProjectionResult, ReorderUrgency
from stockcast.core.projection.engine import run_projection
from stockcast.schemas.product_forecast import (
    ForecastPortfolioResponse,
    ProductForecastDetailResponse,
    ProductForecastRow,
    ProductSnapshot,
    SkippedProduct,
)
from stockcast.schemas.projection_settings import EffectiveProjectionSettings, ShopSettings
from stockcast.services.projection import to_incoming_entries
from stockcast.services.projection_report import (
    build_projection_report,
    format_days_until_stock_out,
    risk_label,
)
from stockcast.services.projection_settings import resolve_projection_settings


logger = logging.getLogger(__name__)

URGENCY_ORDER = {
    ReorderUrgency.CRITICAL: 0,
    ReorderUrgency.WARNING: 1,
    ReorderUrgency.OK: 2,
}
NO_STOCK_OUT_SORT_KEY = 999


def _project_product(
    product: ProductSnapshot,
    shop: ShopSettings | None,
    today: date | None,
    defaults: ShopDefaults,
) -> tuple[EffectiveProjectionSettings, ProjectionResult]:
    settings = resolve_projection_settings(shop=shop, override=product.settings, defaults=defaults)

    projection_input = ProjectionInput(
        current_inventory=product.total_inventory,
        avg_daily_sales=product.avg_daily_sales,
        monthly_growth_rate=settings.monthly_growth_rate,
        lead_time_days=settings.lead_time_days,
        incoming_stock=to_incoming_entries(product.incoming_stock),
        projection_days=defaults.projection_days,
    )
    result = run_projection(
        projection_input,
        today=today,
        warning_threshold_days=settings.alert_threshold_days,
    )
    return settings, result


def build_product_forecast(
    product: ProductSnapshot,
    shop: ShopSettings | None = None,
    today: date | None = None,
    defaults: ShopDefaults | None = None,
) -> ProductForecastDetailResponse:
    """Project a single product and shape the result for its detail page.

    Raises ProjectionInputError when the resolved settings violate the
    engine contract.
    """

    defaults = defaults or get_shop_defaults()
    settings, result = _project_product(product, shop, today, defaults)

    return ProductForecastDetailResponse(
        product_id=product.product_id,
        title=product.title,
        vendor=product.vendor,
        total_inventory=product.total_inventory,
        avg_daily_sales=product.avg_daily_sales,
        settings=settings,
        report=build_projection_report(result),
    )


def _sort_key(row: ProductForecastRow) -> tuple[int, int]:
    days = row.days_until_stock_out
    return (
        URGENCY_ORDER[row.reorder_urgency],
        days if days is not None else NO_STOCK_OUT_SORT_KEY,
    )


def build_forecast_portfolio(
    products: list[ProductSnapshot],
    shop: ShopSettings | None = None,
    today: date | None = None,
    search: str | None = None,
    vendor: str | None = None,
    defaults: ShopDefaults | None = None,
) -> ForecastPortfolioResponse:
    """Project every product and rank them by reorder urgency.

    Counts and the vendor list cover all projected products; ``search``
    (case-insensitive title match) and ``vendor`` only narrow ``items``.
    Products that cannot be projected are reported in ``skipped``.
    """

    defaults = defaults or get_shop_defaults()

    rows: list[ProductForecastRow] = []
    skipped: list[SkippedProduct] = []

    for product in products:
        try:
            _settings, result = _project_product(product, shop, today, defaults)
        except ProjectionInputError as exc:
            logger.warning("Skipping product %s from forecast portfolio: %s", product.product_id, exc)
            skipped.append(
                SkippedProduct(product_id=product.product_id, title=product.title, reason=str(exc))
            )
            continue

        rows.append(
            ProductForecastRow(
                product_id=product.product_id,
                title=product.title,
                vendor=product.vendor,
                total_inventory=product.total_inventory,
                avg_daily_sales=product.avg_daily_sales,
                days_until_stock_out=result.days_until_stock_out,
                stock_out_date=result.stock_out_date,
                must_reorder_by=result.must_reorder_by,
                reorder_urgency=result.reorder_urgency,
                risk_label=risk_label(result.reorder_urgency, result.days_until_stock_out),
                days_until_stock_out_display=format_days_until_stock_out(
                    result.days_until_stock_out,
                    defaults.projection_days,
                ),
            )
        )

    rows.sort(key=_sort_key)

    critical_count = sum(1 for r in rows if r.reorder_urgency == ReorderUrgency.CRITICAL)
    warning_count = sum(1 for r in rows if r.reorder_urgency == ReorderUrgency.WARNING)
    vendors = sorted({r.vendor for r in rows if r.vendor})

    items = rows
    if search:
        needle = search.lower()
        items = [r for r in items if needle in r.title.lower()]
    if vendor:
        items = [r for r in items if r.vendor == vendor]

    return ForecastPortfolioResponse(
        items=items,
        skipped=skipped,
        total_products=len(products),
        critical_count=critical_count,
        warning_count=warning_count,
        at_risk_count=critical_count + warning_count,
        vendors=vendors,
    )
