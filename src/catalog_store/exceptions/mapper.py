import logging
from contextlib import asynccontextmanager, contextmanager
from typing import NoReturn

from sqlalchemy.exc import DBAPIError

from catalog_store.dialects.descriptor import DialectDescriptor, ErrorCategory

from .base import (
    AlreadyExistsError,
    DuplicateKeyError,
    RetryTransactionError,
    StoreError,
    UnclassifiedDatabaseError,
)
from .classifier import classify_db_error

logger = logging.getLogger(__name__)

# -----------------------
# Mapper
# -----------------------

_CATEGORY_EXCEPTION: dict[ErrorCategory, type[StoreError]] = {
    ErrorCategory.CONSTRAINT_VIOLATION: DuplicateKeyError,
    ErrorCategory.RETRYABLE_CONFLICT: RetryTransactionError,
    ErrorCategory.ALREADY_EXISTS: AlreadyExistsError,
    ErrorCategory.UNCLASSIFIED: UnclassifiedDatabaseError,
}

_CATEGORY_MESSAGE: dict[ErrorCategory, str] = {
    ErrorCategory.CONSTRAINT_VIOLATION: "{what}: duplicate key",
    ErrorCategory.RETRYABLE_CONFLICT: "{what}: transaction conflict, retry the transaction",
    ErrorCategory.ALREADY_EXISTS: "{what}: schema object already exists",
    ErrorCategory.UNCLASSIFIED: "{what}: database error",
}


def map_db_error(exc: BaseException, dialect: DialectDescriptor, operation: str | None = None) -> StoreError:
    """
    Build (without raising) the store-level exception for a failed statement.

    The message never includes the raw driver text; that is logged at DEBUG by the
    classifier for unclassified errors only.
    """
    category, code = classify_db_error(exc, dialect)
    what = operation or "Database operation"

    if category is ErrorCategory.CONSTRAINT_VIOLATION:
        # Expected for content-addressed writes: the row is already stored.
        logger.info("mapper.duplicate_key", extra={"operation": what, "dialect": dialect.name, "sql_state": code})
    elif category is ErrorCategory.RETRYABLE_CONFLICT:
        logger.info("mapper.retryable_conflict", extra={"operation": what, "dialect": dialect.name, "sql_state": code})
    elif category is ErrorCategory.ALREADY_EXISTS:
        logger.info("mapper.already_exists", extra={"operation": what, "dialect": dialect.name, "sql_state": code})

    exc_cls = _CATEGORY_EXCEPTION[category]
    return exc_cls(
        _CATEGORY_MESSAGE[category].format(what=what),
        sql_state=code,
        category=category,
        dialect=dialect.name,
    )


def raise_mapped_db_error(exc: BaseException, dialect: DialectDescriptor, operation: str | None = None) -> NoReturn:
    """Map a driver/SQLAlchemy error to a store-level exception and raise it, chained to `exc`."""
    raise map_db_error(exc, dialect, operation) from exc


# -----------------------
# Context managers to DRY error handling around statements
# -----------------------

@contextmanager
def db_error_handler(conn, dialect: DialectDescriptor, operation: str | None = None):
    """
    Usage:
        with db_error_handler(conn, dialect, "store objects"):
            conn.execute(...)

    `conn` is a SQLAlchemy Connection or Session. On a DBAPIError the transaction is rolled
    back and a mapped store-level exception is raised. Anything else propagates untouched.
    """
    try:
        yield
    except DBAPIError as exc:
        try:
            conn.rollback()
        except Exception:
            # Must not mask the original error.
            logger.exception("Failed to rollback after database error", extra={"operation": operation})
        raise_mapped_db_error(exc, dialect, operation)


@asynccontextmanager
async def async_db_error_handler(conn, dialect: DialectDescriptor, operation: str | None = None):
    """
    Usage:
        async with async_db_error_handler(conn, dialect, "update reference"):
            await conn.execute(...)

    Async variant of `db_error_handler` for AsyncConnection / AsyncSession.
    """
    try:
        yield
    except DBAPIError as exc:
        try:
            await conn.rollback()
        except Exception:
            logger.exception("Failed to rollback after database error", extra={"operation": operation})
        raise_mapped_db_error(exc, dialect, operation)


__all__ = [
    "map_db_error",
    "raise_mapped_db_error",
    "db_error_handler",
    "async_db_error_handler",
]
