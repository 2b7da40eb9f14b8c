"""
Exception hierarchy for sale_triggers.

This module defines all public exceptions raised by the library.

Catch `SaleTriggerError` to handle every library-related failure, or one of
the subclasses such as `ProductNotFound` when you need fine-grained control.
Database errors that the library does not translate propagate unchanged.
"""


class SaleTriggerError(Exception):
    """
    Base exception for all sale_triggers errors.

    Example
    -------
    >>> try:
    ...     record_sale(product_id=1, quantity=2, salesperson_id=3,
    ...                 total_price=2400)
    ... except SaleTriggerError:
    ...     handle_failure()
    """

    #: Stable error code for programmatic handling (e.g. API responses).
    code: str = "sale_trigger_error"

    def __init__(self, message: str | None = None) -> None:
        if message is None:
            message = "An unspecified sale_triggers error occurred."
        super().__init__(message)


class InvalidSale(SaleTriggerError):
    """
    Raised when sale arguments are rejected before touching the database.

    Common causes
    -------------
    - quantity is zero, negative or not an integer
    - total_price is negative or not a number
    - product_id / salesperson_id is not a positive integer
    """

    code: str = "invalid_sale"


class ProductNotFound(SaleTriggerError):
    """
    Raised when a sale (or lookup) references a product id that does not exist.
    """

    code: str = "product_not_found"

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product id={product_id} does not exist")


class SaleNotFound(SaleTriggerError):
    code: str = "sale_not_found"

    def __init__(self, sale_id: int) -> None:
        self.sale_id = sale_id
        super().__init__(f"Sale id={sale_id} does not exist")


class InvalidIdentifier(SaleTriggerError):
    """
    Raised when a configured table, function or trigger name is not a plain
    SQL identifier. Names are interpolated into DDL, so only
    letters, digits and underscores are accepted.
    """

    code: str = "invalid_identifier"


class TriggerNotInstalled(SaleTriggerError):
    """
    Raised by the PostgreSQL backend when CHECK_INSTALLED is enabled and the
    sales trigger is missing. Without the trigger, an insert into the sales
    table would silently skip the stock and commission writes.
    """

    code: str = "trigger_not_installed"
