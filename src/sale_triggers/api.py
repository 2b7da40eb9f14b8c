from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Protocol

from django.db import DEFAULT_DB_ALIAS, connections, transaction

from . import sql
from .backends.application import ApplicationBackend
from .backends.postgres import PostgresTriggerBackend
from .commission import to_cents
from .conf import get_config
from .exceptions import InvalidSale, ProductNotFound, SaleNotFound
from .records import Commission, Product, Sale

logger = logging.getLogger(__name__)


class SaleBackend(Protocol):
    """
    Protocol describing the sale-insertion handler.

    A backend decides where the dependent writes of a sale happen: in the
    database (trigger) or in the application. Both must leave the same
    rows behind.
    """
    def install(self) -> None: ...
    def uninstall(self) -> None: ...
    def installed(self) -> bool: ...
    def record_sale(
        self,
        product_id: int,
        quantity: int,
        salesperson_id: int,
        total_price: Decimal,
    ) -> Sale: ...


def get_backend(using: str = DEFAULT_DB_ALIAS) -> SaleBackend:
    """
    Pick the backend for a database alias.

    PostgreSQL gets the real trigger; every other vendor falls back to
    application-side handling.
    """
    if connections[using].vendor == "postgresql":
        return PostgresTriggerBackend(using=using)
    return ApplicationBackend(using=using)


def _positive_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSale(f"{field} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidSale(f"{field} must be positive, got {value}")
    return value


def install(backend: SaleBackend | None = None) -> None:
    (backend or get_backend()).install()


def uninstall(backend: SaleBackend | None = None) -> None:
    (backend or get_backend()).uninstall()


def installed(backend: SaleBackend | None = None) -> bool:
    return (backend or get_backend()).installed()


def create_schema(using: str = DEFAULT_DB_ALIAS) -> None:
    """
    Create the products, sales and commissions tables if they do not exist.
    """
    connection = connections[using]
    statements = sql.schema_statements(get_config(), vendor=connection.vendor)

    with transaction.atomic(using=using):
        with connection.cursor() as cursor:
            for statement in statements:
                cursor.execute(statement)

    logger.info("Created sale schema on %r", using)


def drop_schema(using: str = DEFAULT_DB_ALIAS) -> None:
    """
    Drop the example tables. On PostgreSQL the trigger function is dropped
    as well; the trigger itself goes away with the sales table.
    """
    connection = connections[using]
    config = get_config()
    statements = sql.drop_schema_statements(config)
    if connection.vendor == "postgresql":
        statements.append(sql.drop_function_sql(config))

    with transaction.atomic(using=using):
        with connection.cursor() as cursor:
            for statement in statements:
                cursor.execute(statement)

    logger.info("Dropped sale schema on %r", using)


def record_sale(
    product_id: int,
    quantity: int,
    salesperson_id: int,
    total_price: Decimal | int | str,
    backend: SaleBackend | None = None,
) -> Sale:
    """
    Record a sale and its dependent writes.

    Within one transaction the referenced product's stock is decremented by
    `quantity` and a commission of `total_price * rate` is created for the
    salesperson.

    Parameters
    ----------
    product_id : int
        Existing product id.
    quantity : int
        Units sold. Must be positive. Resulting stock is not checked and
        may go negative.
    salesperson_id : int
        Salesperson credited with the commission.
    total_price : Decimal | int | str
        Sale total. Must be non-negative.
    backend : SaleBackend | None
        Optional backend override. Defaults to `get_backend()`.

    Raises
    ------
    InvalidSale
        If any argument is rejected.
    ProductNotFound
        If `product_id` does not exist.

    Example
    -------
    >>> sale = record_sale(product_id=1, quantity=2, salesperson_id=3,
    ...                    total_price=2400)
    >>> commissions_for_sale(sale.id)[0].commission_amount
    Decimal('120.00')
    """
    product_id = _positive_int(product_id, "product_id")
    quantity = _positive_int(quantity, "quantity")
    salesperson_id = _positive_int(salesperson_id, "salesperson_id")
    price = to_cents(total_price, field="total_price")

    be = backend or get_backend()
    return be.record_sale(product_id, quantity, salesperson_id, price)


def add_product(
    name: str,
    price: Decimal | int | str,
    stock_quantity: int,
    using: str = DEFAULT_DB_ALIAS,
) -> Product:
    if not isinstance(name, str) or not name.strip():
        raise InvalidSale(f"name must be a non-empty string, got {name!r}")
    if len(name) > 100:
        raise InvalidSale(f"name must be at most 100 characters, got {len(name)}")
    if isinstance(stock_quantity, bool) or not isinstance(stock_quantity, int):
        raise InvalidSale(f"stock_quantity must be an integer, got {stock_quantity!r}")
    if stock_quantity < 0:
        raise InvalidSale(f"stock_quantity must not be negative, got {stock_quantity}")
    price = to_cents(price, field="price")
    products = sql.ident(get_config().products_table)
    connection = connections[using]

    with transaction.atomic(using=using):
        with connection.cursor() as cursor:
            cursor.execute(
                f"INSERT INTO {products} (name, price, stock_quantity) "
                f"VALUES (%s, %s, %s)",
                [name, price, stock_quantity],
            )
            if connection.vendor == "postgresql":
                cursor.execute("SELECT lastval()")
                product_id = cursor.fetchone()[0]
            else:
                product_id = cursor.lastrowid

    return get_product(product_id, using=using)


def get_product(product_id: int, using: str = DEFAULT_DB_ALIAS) -> Product:
    products = sql.ident(get_config().products_table)

    with connections[using].cursor() as cursor:
        cursor.execute(
            f"SELECT {', '.join(Product.COLUMNS)} FROM {products} WHERE id = %s",
            [product_id],
        )
        row = cursor.fetchone()

    if row is None:
        raise ProductNotFound(product_id)
    return Product.from_row(row)


def get_sale(sale_id: int, using: str = DEFAULT_DB_ALIAS) -> Sale:
    sales = sql.ident(get_config().sales_table)

    with connections[using].cursor() as cursor:
        cursor.execute(
            f"SELECT {', '.join(Sale.COLUMNS)} FROM {sales} WHERE id = %s",
            [sale_id],
        )
        row = cursor.fetchone()

    if row is None:
        raise SaleNotFound(sale_id)
    return Sale.from_row(row)


def commissions_for_sale(sale_id: int, using: str = DEFAULT_DB_ALIAS) -> list[Commission]:
    """
    Return the commission rows derived from a sale, oldest first.

    Exactly one row is expected per sale; a list is returned so callers
    can detect duplicates.
    """
    commissions = sql.ident(get_config().commissions_table)

    with connections[using].cursor() as cursor:
        cursor.execute(
            f"SELECT {', '.join(Commission.COLUMNS)} FROM {commissions} "
            f"WHERE sale_id = %s ORDER BY id",
            [sale_id],
        )
        rows = cursor.fetchall()

    return [Commission.from_row(row) for row in rows]
