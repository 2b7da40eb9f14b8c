import logging
from decimal import Decimal

from django.db import DEFAULT_DB_ALIAS, connections, transaction

from .. import sql
from ..commission import commission_amount, to_cents
from ..conf import TriggerConfig, get_config
from ..exceptions import ProductNotFound
from ..records import Sale

logger = logging.getLogger(__name__)


class ApplicationBackend:
    """
    Application-side implementation of the sale-insertion handler.

    Used on databases without PL/pgSQL triggers (SQLite in tests and local
    development). The same writes the trigger performs run here inside a
    single `transaction.atomic()` block:

    - decrement products.stock_quantity by the sale quantity
    - insert the sale
    - insert a commission worth total_price * rate

    Unlike the trigger, only sales recorded through this backend are
    covered. A raw INSERT into the sales table bypasses it.
    """

    def __init__(
        self,
        using: str = DEFAULT_DB_ALIAS,
        config: TriggerConfig | None = None,
    ) -> None:
        self.using = using
        self._config = config

    @property
    def config(self) -> TriggerConfig:
        return self._config or get_config()

    @property
    def connection(self):
        return connections[self.using]

    def install(self) -> None:
        logger.info(
            "Database %r (%s) has no trigger support; sales are handled in "
            "the application",
            self.using,
            self.connection.vendor,
        )

    def uninstall(self) -> None:
        logger.info("Nothing to uninstall for application-side sale handling")

    def installed(self) -> bool:
        return True

    def _insert_sale(self, cursor, sales: str, params: list) -> int:
        if self.connection.features.can_return_columns_from_insert:
            cursor.execute(
                f"""
                INSERT INTO {sales} (product_id, quantity, salesperson_id, total_price)
                VALUES (%s, %s, %s, %s)
                RETURNING id
                """,
                params,
            )
            return cursor.fetchone()[0]

        cursor.execute(
            f"""
            INSERT INTO {sales} (product_id, quantity, salesperson_id, total_price)
            VALUES (%s, %s, %s, %s)
            """,
            params,
        )
        return cursor.lastrowid

    def record_sale(
        self,
        product_id: int,
        quantity: int,
        salesperson_id: int,
        total_price: Decimal,
    ) -> Sale:
        config = self.config
        products = sql.ident(config.products_table)
        sales = sql.ident(config.sales_table)
        commissions = sql.ident(config.commissions_table)
        total_price = to_cents(total_price, field="total_price")
        amount = commission_amount(total_price, config.commission_rate)

        with transaction.atomic(using=self.using):
            with self.connection.cursor() as cursor:
                cursor.execute(
                    f"""
                    UPDATE {products}
                    SET stock_quantity = stock_quantity - %s
                    WHERE id = %s
                    """,
                    [quantity, product_id],
                )
                if cursor.rowcount == 0:
                    logger.warning(
                        "Sale rejected: product id=%s does not exist", product_id
                    )
                    raise ProductNotFound(product_id)

                sale_id = self._insert_sale(
                    cursor, sales, [product_id, quantity, salesperson_id, total_price]
                )

                cursor.execute(
                    f"""
                    INSERT INTO {commissions} (sale_id, salesperson_id, commission_amount)
                    VALUES (%s, %s, %s)
                    """,
                    [sale_id, salesperson_id, amount],
                )

                cursor.execute(
                    f"SELECT {', '.join(Sale.COLUMNS)} FROM {sales} WHERE id = %s",
                    [sale_id],
                )
                sale = Sale.from_row(cursor.fetchone())

        logger.debug(
            "Recorded sale id=%s product=%s qty=%s commission=%s in application",
            sale.id,
            sale.product_id,
            sale.quantity,
            amount,
        )
        return sale
