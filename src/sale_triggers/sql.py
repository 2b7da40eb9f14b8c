"""
SQL rendering for the products / sales / commissions example.

Every statement is rendered from a `TriggerConfig`, so the same trigger can
be installed on tables that live under project-specific names. Identifiers
are validated before being interpolated; values (the commission rate) are
rendered as plain decimal literals.

The trigger function performs the two dependent writes of a sale:

    1. decrement products.stock_quantity by NEW.quantity
    2. insert a commissions row worth NEW.total_price * rate

It runs AFTER INSERT FOR EACH ROW, so the commission can reference the new
sale id, and returns NEW so the original insert proceeds unmodified.
"""
from __future__ import annotations

import re

from .conf import TriggerConfig
from .exceptions import InvalidIdentifier

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")

_ID_COLUMN = {
    "postgresql": "SERIAL PRIMARY KEY",
    "sqlite": "INTEGER PRIMARY KEY AUTOINCREMENT",
}

# SQLite has no zone-aware type; CURRENT_TIMESTAMP there is UTC.
_TIMESTAMP_COLUMN = {
    "postgresql": "TIMESTAMPTZ",
    "sqlite": "TIMESTAMP",
}


def ident(name: str) -> str:
    """
    Validate a SQL identifier and return it unchanged.

    PostgreSQL limits identifiers to 63 bytes; anything longer would be
    silently truncated, so it is rejected here instead.
    """
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise InvalidIdentifier(
            f"{name!r} is not a valid SQL identifier "
            f"(letters, digits and underscores, at most 63 characters)"
        )
    return name


def _column(types: dict[str, str], vendor: str) -> str:
    # Other backends accept the PostgreSQL spelling or fail loudly.
    return types.get(vendor, types["postgresql"])


def schema_statements(config: TriggerConfig, vendor: str = "postgresql") -> list[str]:
    """
    CREATE TABLE statements for products, sales and commissions, in
    foreign-key dependency order.
    """
    products = ident(config.products_table)
    sales = ident(config.sales_table)
    commissions = ident(config.commissions_table)
    pk = _column(_ID_COLUMN, vendor)
    timestamp = _column(_TIMESTAMP_COLUMN, vendor)

    return [
        f"""
        CREATE TABLE IF NOT EXISTS {products} (
            id {pk},
            name VARCHAR(100) NOT NULL,
            price DECIMAL(10, 2) NOT NULL,
            stock_quantity INT NOT NULL
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {sales} (
            id {pk},
            product_id INT NOT NULL REFERENCES {products}(id),
            quantity INT NOT NULL,
            salesperson_id INT NOT NULL,
            total_price DECIMAL(10, 2) NOT NULL,
            sale_date {timestamp} DEFAULT CURRENT_TIMESTAMP
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS {commissions} (
            id {pk},
            sale_id INT NOT NULL REFERENCES {sales}(id),
            salesperson_id INT NOT NULL,
            commission_amount DECIMAL(10, 2) NOT NULL
        )
        """,
    ]


def drop_schema_statements(config: TriggerConfig) -> list[str]:
    # Reverse dependency order. Dropping the sales table also drops its trigger.
    return [
        f"DROP TABLE IF EXISTS {ident(config.commissions_table)}",
        f"DROP TABLE IF EXISTS {ident(config.sales_table)}",
        f"DROP TABLE IF EXISTS {ident(config.products_table)}",
    ]


def trigger_function_sql(config: TriggerConfig) -> str:
    products = ident(config.products_table)
    commissions = ident(config.commissions_table)
    function = ident(config.function_name)
    rate = format(config.commission_rate, "f")

    return f"""
        CREATE OR REPLACE FUNCTION {function}()
        RETURNS TRIGGER AS $$
        BEGIN
            UPDATE {products}
            SET stock_quantity = stock_quantity - NEW.quantity
            WHERE id = NEW.product_id;

            INSERT INTO {commissions} (sale_id, salesperson_id, commission_amount)
            VALUES (NEW.id, NEW.salesperson_id, NEW.total_price * {rate});

            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
    """


def create_trigger_sql(config: TriggerConfig) -> str:
    return f"""
        CREATE TRIGGER {ident(config.trigger_name)}
        AFTER INSERT ON {ident(config.sales_table)}
        FOR EACH ROW
        EXECUTE FUNCTION {ident(config.function_name)}()
    """


def drop_trigger_sql(config: TriggerConfig) -> str:
    return (
        f"DROP TRIGGER IF EXISTS {ident(config.trigger_name)} "
        f"ON {ident(config.sales_table)}"
    )


def drop_function_sql(config: TriggerConfig) -> str:
    return f"DROP FUNCTION IF EXISTS {ident(config.function_name)}()"


def install_statements(config: TriggerConfig) -> list[str]:
    """
    Statements that (re)install the trigger. Safe to run repeatedly: the
    function is replaced and any existing trigger is dropped first.
    """
    return [
        trigger_function_sql(config),
        drop_trigger_sql(config),
        create_trigger_sql(config),
    ]


def uninstall_statements(config: TriggerConfig) -> list[str]:
    return [drop_trigger_sql(config), drop_function_sql(config)]
