"""
Store-level exceptions.

Driver exceptions (psycopg, pymysql, sqlite3, ...) never leave the persistence layer as-is:
`catalog_store.exceptions.mapper` classifies them through the active dialect and raises one
of the classes below, chained to the original error.
"""

from __future__ import annotations

from typing import Any

from catalog_store.dialects.descriptor import ErrorCategory


class StoreError(Exception):
    """
    Base exception for persistence errors.

    - message: human-friendly message
    - sql_state: raw vendor error code that triggered the error, if any (for logs)
    - category: classification result, if the error went through the classifier
    - dialect: name of the dialect that classified it
    """

    retryable: bool = False

    def __init__(self, message: str, *, sql_state: str | None = None,
                 category: ErrorCategory | None = None, dialect: str | None = None):
        super().__init__(message)
        self.message = message
        self.sql_state = sql_state
        self.category = category
        self.dialect = dialect

    def __str__(self) -> str:
        parts = []
        if self.dialect:
            parts.append(f"dialect: {self.dialect}")
        if self.sql_state:
            parts.append(f"code: {self.sql_state}")
        if self.category:
            parts.append(f"category: {self.category.value}")
        if parts:
            return f"{self.message} ({'; '.join(parts)})"
        return self.message

    def to_payload(self) -> dict[str, Any]:
        """
        JSON-serializable view for structured logs and callers:
            {"detail": "...", "category": "retryable_conflict", "code": "40001", "retryable": true}
        """
        payload: dict[str, Any] = {"detail": self.message, "retryable": self.retryable}
        if self.category:
            payload["category"] = self.category.value
        if self.sql_state:
            payload["code"] = self.sql_state
        if self.dialect:
            payload["dialect"] = self.dialect
        return payload


class DuplicateKeyError(StoreError):
    """A unique key fired on insert. For content-addressed rows the content is already stored."""

    def __init__(self, message: str = "Duplicate key", **kwargs):
        kwargs.setdefault("category", ErrorCategory.CONSTRAINT_VIOLATION)
        super().__init__(message, **kwargs)


class RetryTransactionError(StoreError):
    """Deadlock or serialization failure. Re-run the whole transaction, not just the statement."""

    retryable = True

    def __init__(self, message: str = "Transaction conflict, retry", **kwargs):
        kwargs.setdefault("category", ErrorCategory.RETRYABLE_CONFLICT)
        super().__init__(message, **kwargs)


class AlreadyExistsError(StoreError):
    def __init__(self, message: str = "Schema object already exists", **kwargs):
        kwargs.setdefault("category", ErrorCategory.ALREADY_EXISTS)
        super().__init__(message, **kwargs)


class UnclassifiedDatabaseError(StoreError):
    def __init__(self, message: str = "Database error", **kwargs):
        kwargs.setdefault("category", ErrorCategory.UNCLASSIFIED)
        super().__init__(message, **kwargs)


class UnsupportedDatabaseError(StoreError):
    """The connected engine has no dialect descriptor. Fatal at startup."""

    def __init__(self, product_name: str):
        super().__init__(f"Could not select a dialect for database product '{product_name}'")
        self.product_name = product_name


class DialectDetectionError(StoreError):
    """The detection probe itself failed (connection refused, metadata query error, ...)."""


__all__ = [
    "StoreError",
    "DuplicateKeyError",
    "RetryTransactionError",
    "AlreadyExistsError",
    "UnclassifiedDatabaseError",
    "UnsupportedDatabaseError",
    "DialectDetectionError",
]
