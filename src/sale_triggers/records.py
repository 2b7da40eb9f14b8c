from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from datetime import timezone as dt_timezone
from decimal import Decimal
from typing import Any, Sequence

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .commission import to_decimal


def _sale_date(value: Any) -> datetime | None:
    """
    Normalize sale_date as read back from the database.

    PostgreSQL returns an aware datetime from TIMESTAMPTZ. SQLite stores
    CURRENT_TIMESTAMP as naive UTC text, which is made aware when USE_TZ
    is on, matching what the ORM returns for DateTimeField.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = parse_datetime(value)
    if settings.USE_TZ and timezone.is_naive(value):
        value = timezone.make_aware(value, dt_timezone.utc)
    return value


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    price: Decimal
    stock_quantity: int

    COLUMNS = ("id", "name", "price", "stock_quantity")

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "Product":
        id_, name, price, stock_quantity = row
        return cls(
            id=int(id_),
            name=name,
            price=to_decimal(price, field="price"),
            stock_quantity=int(stock_quantity),
        )


@dataclass(frozen=True)
class Sale:
    """
    A row of the sales table. Immutable once inserted.
    """
    id: int
    product_id: int
    quantity: int
    salesperson_id: int
    total_price: Decimal
    sale_date: datetime | None

    COLUMNS = (
        "id", "product_id", "quantity", "salesperson_id", "total_price", "sale_date",
    )

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "Sale":
        id_, product_id, quantity, salesperson_id, total_price, sale_date = row
        return cls(
            id=int(id_),
            product_id=int(product_id),
            quantity=int(quantity),
            salesperson_id=int(salesperson_id),
            total_price=to_decimal(total_price, field="total_price"),
            sale_date=_sale_date(sale_date),
        )


@dataclass(frozen=True)
class Commission:
    """
    A row of the commissions table, derived from exactly one sale.
    """
    id: int
    sale_id: int
    salesperson_id: int
    commission_amount: Decimal

    COLUMNS = ("id", "sale_id", "salesperson_id", "commission_amount")

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "Commission":
        id_, sale_id, salesperson_id, amount = row
        return cls(
            id=int(id_),
            sale_id=int(sale_id),
            salesperson_id=int(salesperson_id),
            commission_amount=to_decimal(amount, field="commission_amount"),
        )
