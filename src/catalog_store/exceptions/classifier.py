import logging

from sqlalchemy.exc import DBAPIError

from catalog_store.dialects.descriptor import DialectDescriptor, ErrorCategory

logger = logging.getLogger(__name__)

# =================================================================================================================
# Raw vendor code extraction
# =================================================================================================================

# PyMySQL and mysqlclient expose only the numeric server errno (args[0]), not the SQLSTATE.
# Map the errnos the classifier cares about to their documented SQLSTATE.
MYSQL_ERRNO_SQLSTATE = {
    1062: "23000",  # ER_DUP_ENTRY
    1586: "23000",  # ER_DUP_ENTRY_WITH_KEY_NAME
    1213: "40001",  # ER_LOCK_DEADLOCK
    1050: "42S01",  # ER_TABLE_EXISTS_ERROR
}


def _non_empty(value) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def extract_error_code(orig: BaseException | None) -> str | None:
    """
    Return the raw vendor error code carried by a DB-API exception, or None.

    Lookup order:
      - `sqlstate`: psycopg 3, asyncpg, mysql-connector
      - `pgcode`: psycopg2
      - `sqlite_errorname`: sqlite3 / aiosqlite (extended result code name)
      - MySQL errno in `args[0]`: PyMySQL, mysqlclient
    """
    if orig is None:
        return None

    for attr in ("sqlstate", "pgcode", "sqlite_errorname"):
        code = _non_empty(getattr(orig, attr, None))
        if code:
            return code

    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int) and not isinstance(args[0], bool):
        return MYSQL_ERRNO_SQLSTATE.get(args[0])

    return None


# =================================================================================================================
# Classification
# =================================================================================================================

def classify_db_error(exc: BaseException, dialect: DialectDescriptor) -> tuple[ErrorCategory, str | None]:
    """
    Classify a failed statement through the dialect's error tables.

    Accepts a SQLAlchemy DBAPIError (the driver error is taken from `.orig`) or a bare
    driver exception.

    Returns:
        A tuple of (ErrorCategory, raw code if one could be extracted)
    """
    orig = exc.orig if isinstance(exc, DBAPIError) else exc
    code = extract_error_code(orig)
    category = dialect.classify(code)

    if category is ErrorCategory.UNCLASSIFIED:
        # Surfaces unknown codes to monitoring; the raw driver message stays at DEBUG.
        logger.warning(
            "classifier.unclassified",
            extra={"dialect": dialect.name, "sql_state": code, "error_type": type(orig).__name__},
        )
        logger.debug("classifier.unclassified_raw", extra={"dialect": dialect.name, "raw": str(orig)})
    else:
        logger.debug(
            "classifier.classified",
            extra={"dialect": dialect.name, "sql_state": code, "category": category.value},
        )

    return category, code


__all__ = ["MYSQL_ERRNO_SQLSTATE", "extract_error_code", "classify_db_error"]
