# src/catalog_store/core/logging/
# ├─ __init__.py            # public API: setup_logging, transaction id helpers
# ├─ builder.py             # make_dict_config(settings) + setup_logging(settings)
# ├─ formatters.py          # JsonFormatter, ColorFormatter
# ├─ filters.py             # TransactionIdFilter (+ contextvar helpers), RedactFilter
# └─ handlers.py            # handler config factories (console, rotating files)

from .builder import setup_logging, make_dict_config
from .filters import (
    set_transaction_id,
    reset_transaction_id,
    get_transaction_id,
    transaction_context,
    TransactionIdFilter,
)

__all__ = [
    "setup_logging",
    "make_dict_config",
    "set_transaction_id",
    "reset_transaction_id",
    "get_transaction_id",
    "transaction_context",
    "TransactionIdFilter",
]
