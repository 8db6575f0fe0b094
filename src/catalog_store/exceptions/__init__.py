
# catalog_store/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py          # Store-level errors (DuplicateKeyError, RetryTransactionError, ...)
# │   ├── classifier.py    # Extract vendor error codes from driver errors and classify them
# │   └── mapper.py        # Map classified driver errors to store-level errors (+ rollback helpers)

from .base import (
    StoreError,
    DuplicateKeyError,
    RetryTransactionError,
    AlreadyExistsError,
    UnclassifiedDatabaseError,
    UnsupportedDatabaseError,
    DialectDetectionError,
)
from .classifier import extract_error_code, classify_db_error
from .mapper import map_db_error, raise_mapped_db_error, db_error_handler, async_db_error_handler

__all__ = [
    "StoreError",
    "DuplicateKeyError",
    "RetryTransactionError",
    "AlreadyExistsError",
    "UnclassifiedDatabaseError",
    "UnsupportedDatabaseError",
    "DialectDetectionError",
    "extract_error_code",
    "classify_db_error",
    "map_db_error",
    "raise_mapped_db_error",
    "db_error_handler",
    "async_db_error_handler",
]
