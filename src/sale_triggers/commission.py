from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .exceptions import InvalidSale

DEFAULT_COMMISSION_RATE = Decimal("0.05")

_CENT = Decimal("0.01")
# DECIMAL(10, 2) holds at most 8 integer digits.
_MAX_AMOUNT = Decimal("100000000")


def to_decimal(value, *, field: str = "value") -> Decimal:
    """
    Coerce ints, strings and Decimals into a Decimal.

    Floats go through `str()` first so that 2400.1 becomes Decimal("2400.1")
    rather than its binary expansion.
    """
    if isinstance(value, bool):
        raise InvalidSale(f"{field} must be a number, got {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidSale(f"{field} must be a number, got {value!r}") from e
    if not result.is_finite():
        raise InvalidSale(f"{field} must be finite, got {value!r}")
    return result


def commission_amount(total_price, rate=DEFAULT_COMMISSION_RATE) -> Decimal:
    """
    Compute the commission owed on a sale.

    The result is rounded to cents half-up, which is what PostgreSQL does
    when the trigger assigns ``NEW.total_price * rate`` into a DECIMAL(10, 2)
    column. Both backends therefore agree on the stored amount.

    Parameters
    ----------
    total_price : Decimal | int | str | float
        Sale total. Must be non-negative.
    rate : Decimal | int | str | float, default=0.05
        Commission rate in [0, 1].

    Returns
    -------
    Decimal
        Commission amount with exactly two decimal places.

    Example
    -------
    >>> commission_amount(2400)
    Decimal('120.00')
    """
    price = to_decimal(total_price, field="total_price")
    rate = to_decimal(rate, field="rate")

    if price < 0:
        raise InvalidSale(f"total_price must not be negative, got {price}")
    if not (0 <= rate <= 1):
        raise InvalidSale(f"rate must be between 0 and 1, got {rate}")

    return (price * rate).quantize(_CENT, rounding=ROUND_HALF_UP)


def to_cents(value, *, field: str = "value") -> Decimal:
    """
    Round a non-negative money value to the DECIMAL(10, 2) scale of the
    price columns, half-up, as PostgreSQL does on assignment.

    Commissions are computed from this stored total, so both backends
    derive them from the same number.
    """
    amount = to_decimal(value, field=field)
    if amount < 0:
        raise InvalidSale(f"{field} must not be negative, got {amount}")
    amount = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    if amount >= _MAX_AMOUNT:
        raise InvalidSale(f"{field} does not fit DECIMAL(10, 2), got {amount}")
    return amount
