from decimal import Decimal

import pytest

from sale_triggers.commission import (
    DEFAULT_COMMISSION_RATE,
    commission_amount,
    to_cents,
    to_decimal,
)
from sale_triggers.exceptions import InvalidSale


def test_default_rate_is_five_percent():
    assert DEFAULT_COMMISSION_RATE == Decimal("0.05")


def test_example_sale_commission():
    assert commission_amount(2400) == Decimal("120.00")


def test_result_has_two_decimal_places():
    assert commission_amount("19.99").as_tuple().exponent == -2


def test_rounds_half_up_to_cents():
    # 0.05 * 0.10 = 0.005 -> 0.01
    assert commission_amount("0.10") == Decimal("0.01")
    assert commission_amount("0.09") == Decimal("0.00")


def test_custom_rate():
    assert commission_amount(1000, rate="0.07") == Decimal("70.00")


def test_float_goes_through_str():
    assert to_decimal(2400.1) == Decimal("2400.1")


def test_negative_price_rejected():
    with pytest.raises(InvalidSale):
        commission_amount(-1)


def test_rate_out_of_range_rejected():
    with pytest.raises(InvalidSale):
        commission_amount(100, rate="1.5")


@pytest.mark.parametrize("value", [None, "abc", True, "NaN", "Infinity"])
def test_non_numbers_rejected(value):
    with pytest.raises(InvalidSale):
        to_decimal(value)


def test_to_cents_rounds_half_up_like_decimal_10_2():
    assert to_cents("0.095") == Decimal("0.10")
    assert to_cents("0.094") == Decimal("0.09")
    assert to_cents(2400) == Decimal("2400.00")


def test_commission_of_rounded_total_matches_stored_value():
    # 0.095 is stored as 0.10, whose commission is 0.005 -> 0.01.
    assert commission_amount(to_cents("0.095")) == Decimal("0.01")


def test_to_cents_rejects_negative_and_oversized_amounts():
    with pytest.raises(InvalidSale):
        to_cents("-0.01")
    with pytest.raises(InvalidSale):
        to_cents("99999999.995")
    assert to_cents("99999999.99") == Decimal("99999999.99")
