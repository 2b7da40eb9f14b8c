from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .commission import DEFAULT_COMMISSION_RATE, to_decimal
from .exceptions import InvalidSale

SETTING_NAME = "SALE_TRIGGERS"


@dataclass(frozen=True)
class TriggerConfig:
    """
    Names and parameters used to render and run the sales trigger.

    Defaults reproduce the products / sales / commissions example. Projects
    that keep these tables under other names override them through the
    ``SALE_TRIGGERS`` Django setting:

        SALE_TRIGGERS = {
            "SALES_TABLE": "shop_sale",
            "COMMISSION_RATE": "0.07",
        }
    """
    products_table: str = "products"
    sales_table: str = "sales"
    commissions_table: str = "commissions"
    function_name: str = "update_stock_and_commission"
    trigger_name: str = "after_sale_insert"
    commission_rate: Decimal = DEFAULT_COMMISSION_RATE
    check_installed: bool = False


_KEYS = {
    "PRODUCTS_TABLE": "products_table",
    "SALES_TABLE": "sales_table",
    "COMMISSIONS_TABLE": "commissions_table",
    "FUNCTION_NAME": "function_name",
    "TRIGGER_NAME": "trigger_name",
    "COMMISSION_RATE": "commission_rate",
    "CHECK_INSTALLED": "check_installed",
}


def _parse_rate(value: Any) -> Decimal:
    try:
        rate = to_decimal(value, field="COMMISSION_RATE")
    except InvalidSale as e:
        raise ImproperlyConfigured(f"{SETTING_NAME}: {e}") from e
    if not (0 <= rate <= 1):
        raise ImproperlyConfigured(
            f"{SETTING_NAME}: COMMISSION_RATE must be between 0 and 1, got {rate}"
        )
    return rate


def get_config() -> TriggerConfig:
    """
    Build a TriggerConfig from Django settings.

    Settings are read on every call so ``override_settings`` takes effect
    in tests without any cache to clear.
    """
    raw: Mapping[str, Any] = getattr(settings, SETTING_NAME, None) or {}

    if not isinstance(raw, Mapping):
        raise ImproperlyConfigured(
            f"{SETTING_NAME} must be a dict, got {type(raw).__name__}"
        )

    unknown = sorted(set(raw) - set(_KEYS))
    if unknown:
        raise ImproperlyConfigured(
            f"{SETTING_NAME}: unknown keys {unknown}. Available: {sorted(_KEYS)}"
        )

    values: dict[str, Any] = {_KEYS[k]: v for k, v in raw.items()}
    if "commission_rate" in values:
        values["commission_rate"] = _parse_rate(values["commission_rate"])
    if "check_installed" in values:
        values["check_installed"] = bool(values["check_installed"])

    return TriggerConfig(**values)
