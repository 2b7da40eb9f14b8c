from .api import (
    add_product,
    commissions_for_sale,
    create_schema,
    drop_schema,
    get_backend,
    get_product,
    get_sale,
    install,
    installed,
    record_sale,
    uninstall,
)
from .commission import DEFAULT_COMMISSION_RATE, commission_amount
from .exceptions import (
    InvalidIdentifier,
    InvalidSale,
    ProductNotFound,
    SaleNotFound,
    SaleTriggerError,
    TriggerNotInstalled,
)
from .records import Commission, Product, Sale

__all__ = [
    "add_product",
    "commissions_for_sale",
    "create_schema",
    "drop_schema",
    "get_backend",
    "get_product",
    "get_sale",
    "install",
    "installed",
    "record_sale",
    "uninstall",
    "DEFAULT_COMMISSION_RATE",
    "commission_amount",
    "Commission",
    "Product",
    "Sale",
    "SaleTriggerError",
    "InvalidSale",
    "InvalidIdentifier",
    "ProductNotFound",
    "SaleNotFound",
    "TriggerNotInstalled",
]
