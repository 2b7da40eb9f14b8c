import logging
from decimal import Decimal

from django.db import DEFAULT_DB_ALIAS, IntegrityError, connections, transaction

from .. import sql
from ..conf import TriggerConfig, get_config
from ..exceptions import ProductNotFound, TriggerNotInstalled
from ..records import Sale

logger = logging.getLogger(__name__)

FOREIGN_KEY_VIOLATION = "23503"


def _sqlstate(error: IntegrityError) -> str | None:
    """
    SQLSTATE of the driver error Django wrapped (psycopg 3: `sqlstate`,
    psycopg2: `pgcode`).
    """
    cause = error.__cause__
    return getattr(cause, "sqlstate", None) or getattr(cause, "pgcode", None)


class PostgresTriggerBackend:
    """
    PostgreSQL trigger backend.

    The sale-insertion handler lives in the database as a PL/pgSQL function
    bound to an AFTER INSERT trigger on the sales table. Recording a sale is
    then a single INSERT: PostgreSQL runs the stock decrement and the
    commission insert inside the same statement, and therefore the same
    transaction, as the sale itself.

    Key properties
    --------------
    - Any writer is covered: raw SQL, the ORM, other services sharing the
      database. Nothing depends on going through this library.
    - All-or-nothing: if either dependent write fails, the sale insert is
      rolled back with it.
    - No concurrency control beyond that of the enclosing transaction.
      Concurrent sales of the same product serialize on the product row
      lock taken by the UPDATE, and stock may go negative.

    Limitations
    -----------
    - Requires PostgreSQL 11+ (EXECUTE FUNCTION syntax).
    - The trigger must be installed (see `install`) before sales are recorded.
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
        """
        Create (or replace) the trigger function and bind the trigger.

        Runs in one transaction so a failure leaves the previous
        installation untouched.
        """
        config = self.config

        with transaction.atomic(using=self.using):
            with self.connection.cursor() as cursor:
                for statement in sql.install_statements(config):
                    cursor.execute(statement)

        logger.info(
            "Installed trigger %s on %s (function %s, rate %s)",
            config.trigger_name,
            config.sales_table,
            config.function_name,
            config.commission_rate,
        )

    def uninstall(self) -> None:
        config = self.config

        with transaction.atomic(using=self.using):
            with self.connection.cursor() as cursor:
                for statement in sql.uninstall_statements(config):
                    cursor.execute(statement)

        logger.info(
            "Removed trigger %s from %s", config.trigger_name, config.sales_table
        )

    def installed(self) -> bool:
        """
        Return True if the trigger is bound to the configured sales table.
        """
        config = self.config

        with self.connection.cursor() as cursor:
            cursor.execute(
                """
                SELECT EXISTS (
                    SELECT 1
                    FROM pg_trigger t
                    JOIN pg_class c ON c.oid = t.tgrelid
                    WHERE t.tgname = %s
                      AND c.relname = %s
                      AND NOT t.tgisinternal
                )
                """,
                [config.trigger_name, config.sales_table],
            )
            return bool(cursor.fetchone()[0])

    def record_sale(
        self,
        product_id: int,
        quantity: int,
        salesperson_id: int,
        total_price: Decimal,
    ) -> Sale:
        """
        Insert a sale row and let the trigger perform the dependent writes.

        Raises
        ------
        ProductNotFound
            If the product row does not exist, checked before the insert
            so that deferred foreign keys cannot let the trigger run.
        TriggerNotInstalled
            If CHECK_INSTALLED is enabled and the trigger is missing.
        """
        config = self.config
        products = sql.ident(config.products_table)
        sales = sql.ident(config.sales_table)

        if config.check_installed and not self.installed():
            raise TriggerNotInstalled(
                f"Trigger {config.trigger_name!r} is not installed on "
                f"{config.sales_table!r}"
            )

        try:
            with transaction.atomic(using=self.using):
                with self.connection.cursor() as cursor:
                    # Foreign keys created by Django are DEFERRABLE INITIALLY
                    # DEFERRED, so inside an outer transaction the insert
                    # would succeed and the trigger would write a commission
                    # for a missing product. KEY SHARE keeps the row from
                    # being deleted until commit.
                    cursor.execute(
                        f"SELECT 1 FROM {products} WHERE id = %s FOR KEY SHARE",
                        [product_id],
                    )
                    if cursor.fetchone() is None:
                        raise ProductNotFound(product_id)

                    cursor.execute(
                        f"""
                        INSERT INTO {sales}
                            (product_id, quantity, salesperson_id, total_price)
                        VALUES (%s, %s, %s, %s)
                        RETURNING {', '.join(Sale.COLUMNS)}
                        """,
                        [product_id, quantity, salesperson_id, total_price],
                    )
                    row = cursor.fetchone()
        except ProductNotFound:
            logger.warning("Sale rejected: product id=%s does not exist", product_id)
            raise
        except IntegrityError as e:
            # Only a foreign key violation on the insert means a missing
            # product. Constraint errors raised by the trigger body propagate.
            if _sqlstate(e) != FOREIGN_KEY_VIOLATION:
                raise
            logger.warning(
                "Sale rejected: product id=%s does not exist (%s)", product_id, e
            )
            raise ProductNotFound(product_id) from e

        sale = Sale.from_row(row)
        logger.debug(
            "Recorded sale id=%s product=%s qty=%s via trigger",
            sale.id,
            sale.product_id,
            sale.quantity,
        )
        return sale
