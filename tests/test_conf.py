from decimal import Decimal

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from sale_triggers.conf import TriggerConfig, get_config


def test_defaults_match_example_names():
    config = get_config()

    assert config == TriggerConfig()
    assert config.products_table == "products"
    assert config.sales_table == "sales"
    assert config.commissions_table == "commissions"
    assert config.commission_rate == Decimal("0.05")
    assert config.check_installed is False


@override_settings(SALE_TRIGGERS={"SALES_TABLE": "shop_sale", "COMMISSION_RATE": "0.07"})
def test_overrides_are_applied():
    config = get_config()

    assert config.sales_table == "shop_sale"
    assert config.commission_rate == Decimal("0.07")
    assert config.products_table == "products"


@override_settings(SALE_TRIGGERS={"SALES_TABEL": "typo"})
def test_unknown_key_is_rejected():
    with pytest.raises(ImproperlyConfigured, match="SALES_TABEL"):
        get_config()


@override_settings(SALE_TRIGGERS={"COMMISSION_RATE": "2"})
def test_rate_out_of_range_is_rejected():
    with pytest.raises(ImproperlyConfigured):
        get_config()


@override_settings(SALE_TRIGGERS={"COMMISSION_RATE": "five percent"})
def test_rate_not_a_number_is_rejected():
    with pytest.raises(ImproperlyConfigured):
        get_config()


@override_settings(SALE_TRIGGERS=["not", "a", "dict"])
def test_setting_must_be_a_dict():
    with pytest.raises(ImproperlyConfigured):
        get_config()
