
# catalog_store/
# │
# ├── dialects/
# │   ├── __init__.py
# │   ├── column_types.py   # Logical column vocabulary + (keyword, type code) pairs
# │   ├── descriptor.py     # DialectDescriptor: type mapping, error classifier, statement adapter
# │   ├── specifics.py      # One descriptor per supported engine family
# │   └── detector.py       # Once-only, process-wide descriptor resolution

from .column_types import ColumnType, LogicalColumnType
from .descriptor import DialectDescriptor, DialectFamily, ErrorCategory, MySQLDialectDescriptor
from .specifics import ALL_DIALECTS, COCKROACHDB, MYSQL, POSTGRESQL, SQLITE
from .detector import DialectDetector, reset_dialect_cache, resolve_dialect, resolve_dialect_async

__all__ = [
    "ColumnType",
    "LogicalColumnType",
    "DialectDescriptor",
    "DialectFamily",
    "ErrorCategory",
    "MySQLDialectDescriptor",
    "ALL_DIALECTS",
    "COCKROACHDB",
    "MYSQL",
    "POSTGRESQL",
    "SQLITE",
    "DialectDetector",
    "reset_dialect_cache",
    "resolve_dialect",
    "resolve_dialect_async",
]
