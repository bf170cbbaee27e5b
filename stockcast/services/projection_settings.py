from __future__ import annotations

from stockcast.core.config import ShopDefaults, get_shop_defaults
from stockcast.schemas.projection_settings import (
    EffectiveProjectionSettings,
    ProductSettingsOverride,
    SettingsSource,
    ShopSettings,
)


OVERRIDABLE_FIELDS = ("lead_time_days", "sale_range_days", "monthly_growth_rate")


def resolve_projection_settings(
    shop: ShopSettings | None = None,
    override: ProductSettingsOverride | None = None,
    defaults: ShopDefaults | None = None,
) -> EffectiveProjectionSettings:
    """Resolve the settings a product projection should use.

    Product overrides win over shop settings, which win over the configured
    defaults. The alert threshold is shop-level only.
    """

    shop = shop or ShopSettings()
    defaults = defaults or get_shop_defaults()

    values: dict[str, int | float] = {}
    sources: dict[str, SettingsSource] = {}
    explanation_parts: list[str] = []

    for name in OVERRIDABLE_FIELDS:
        product_value = getattr(override, name) if override is not None else None
        shop_value = getattr(shop, name)

        if product_value is not None:
            values[name] = product_value
            sources[name] = SettingsSource.PRODUCT
            explanation_parts.append(f"Using product override {name}={product_value}.")
        elif shop_value is not None:
            values[name] = shop_value
            sources[name] = SettingsSource.SHOP
            explanation_parts.append(f"Using shop setting {name}={shop_value}.")
        else:
            values[name] = getattr(defaults, name)
            sources[name] = SettingsSource.DEFAULT
            explanation_parts.append(
                f"{name} is not set for product or shop; using default {values[name]}."
            )

    if shop.alert_threshold_days is not None:
        alert_threshold_days = shop.alert_threshold_days
        sources["alert_threshold_days"] = SettingsSource.SHOP
    else:
        alert_threshold_days = defaults.alert_threshold_days
        sources["alert_threshold_days"] = SettingsSource.DEFAULT
    explanation_parts.append(f"Warning threshold is {alert_threshold_days} days.")

    return EffectiveProjectionSettings(
        lead_time_days=int(values["lead_time_days"]),
        sale_range_days=int(values["sale_range_days"]),
        monthly_growth_rate=float(values["monthly_growth_rate"]),
        alert_threshold_days=alert_threshold_days,
        sources=sources,
        explanation=" ".join(explanation_parts),
    )
