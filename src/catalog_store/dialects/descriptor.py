"""
Dialect descriptors: everything the store needs to know about one database engine family.

A descriptor bundles
  - the column type mapping (LogicalColumnType -> ColumnType),
  - the error classifier (raw vendor error code -> ErrorCategory),
  - the statement adapter (idempotent inserts, primary-key column specs).

Descriptors are immutable and shared; the detector picks exactly one per process.
The concrete instances live in `catalog_store.dialects.specifics`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from sqlalchemy.types import TypeEngine

from .column_types import ColumnType, LogicalColumnType


class ErrorCategory(str, Enum):
    """
    Outcome of classifying a failed statement.

    - CONSTRAINT_VIOLATION: a unique key fired; for content-addressed rows this means
      "already stored" and is not retryable.
    - RETRYABLE_CONFLICT: deadlock / serialization failure; the whole transaction must be
      re-executed from the start.
    - ALREADY_EXISTS: a schema object was created concurrently (idempotent DDL).
    - UNCLASSIFIED: nothing matched; treat as fatal.
    """

    CONSTRAINT_VIOLATION = "constraint_violation"
    RETRYABLE_CONFLICT = "retryable_conflict"
    ALREADY_EXISTS = "already_exists"
    UNCLASSIFIED = "unclassified"


class DialectFamily(str, Enum):
    POSTGRESQL = "postgresql"
    COCKROACHDB = "cockroachdb"
    SQLITE = "sqlite"
    MYSQL = "mysql"


_INSERT_INTO = re.compile(r"^(\s*)INSERT\s+INTO\b", re.IGNORECASE)
_ON_CONFLICT_DO_NOTHING = re.compile(r"\bON\s+CONFLICT\s+DO\s+NOTHING\s*;?\s*$", re.IGNORECASE)
_INSERT_IGNORE_INTO = re.compile(r"^\s*INSERT\s+IGNORE\s+INTO\b", re.IGNORECASE)


def _require_insert(sql: str) -> None:
    if not _INSERT_INTO.match(sql):
        raise ValueError(f"Expected an 'INSERT INTO' statement, got: {sql[:60]!r}")


@dataclass(frozen=True, eq=False)
class DialectDescriptor:
    """
    Immutable per-engine-family bundle.

    The base implementation adapts statements the way PostgreSQL-compatible engines (and
    SQLite) do: `ON CONFLICT DO NOTHING` and plain primary-key columns. Families that differ
    override `wrap_insert` / `primary_key_column`.

    Construction validates that the column mapping is total over LogicalColumnType and that
    the three code sets are disjoint. Either failure is a programming error.
    """

    family: DialectFamily
    column_types: Mapping[LogicalColumnType, ColumnType]
    constraint_violation_codes: frozenset[str]
    retry_codes: frozenset[str]
    already_exists_codes: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        missing = [t.name for t in LogicalColumnType if t not in self.column_types]
        if missing:
            raise AssertionError(f"{self.family.value}: no column type for {', '.join(missing)}")

        code_sets = {
            "constraint_violation": frozenset(self.constraint_violation_codes),
            "retry": frozenset(self.retry_codes),
            "already_exists": frozenset(self.already_exists_codes),
        }
        names = list(code_sets)
        for i, left in enumerate(names):
            for right in names[i + 1:]:
                shared = code_sets[left] & code_sets[right]
                if shared:
                    raise AssertionError(
                        f"{self.family.value}: code(s) {sorted(shared)} are both {left} and {right}"
                    )

        # frozen dataclass: assign the normalized values through object.__setattr__
        object.__setattr__(self, "column_types", MappingProxyType(dict(self.column_types)))
        object.__setattr__(self, "constraint_violation_codes", code_sets["constraint_violation"])
        object.__setattr__(self, "retry_codes", code_sets["retry"])
        object.__setattr__(self, "already_exists_codes", code_sets["already_exists"])

    @property
    def name(self) -> str:
        return self.family.value

    # -----------------------
    # Column type mapping
    # -----------------------

    def type_of(self, logical: LogicalColumnType) -> ColumnType:
        return self.column_types[logical]

    def keyword_of(self, logical: LogicalColumnType) -> str:
        return self.column_types[logical].keyword

    def code_of(self, logical: LogicalColumnType) -> type[TypeEngine]:
        return self.column_types[logical].type_code

    # -----------------------
    # Error classification
    # -----------------------

    def is_constraint_violation(self, code: str | None) -> bool:
        return code in self.constraint_violation_codes

    def is_retry_transaction(self, code: str | None) -> bool:
        return code in self.retry_codes

    def is_already_exists(self, code: str | None) -> bool:
        return code in self.already_exists_codes

    def classify(self, code: str | None) -> ErrorCategory:
        """
        Map a raw vendor error code to a category. First match wins, in this order:
        constraint violation, retryable conflict, already exists. Anything else
        (including a missing code) is UNCLASSIFIED.
        """
        if not code:
            return ErrorCategory.UNCLASSIFIED
        if self.is_constraint_violation(code):
            return ErrorCategory.CONSTRAINT_VIOLATION
        if self.is_retry_transaction(code):
            return ErrorCategory.RETRYABLE_CONFLICT
        if self.is_already_exists(code):
            return ErrorCategory.ALREADY_EXISTS
        return ErrorCategory.UNCLASSIFIED

    # -----------------------
    # Statement adaptation
    # -----------------------

    def wrap_insert(self, sql: str) -> str:
        """Make an `INSERT INTO ...` statement ignore rows whose unique key already exists.

        Already adapted statements are returned unchanged.
        """
        _require_insert(sql)
        if _ON_CONFLICT_DO_NOTHING.search(sql):
            return sql
        return f"{sql.rstrip().rstrip(';')} ON CONFLICT DO NOTHING"

    def primary_key_column(self, column: str, logical: LogicalColumnType) -> str:
        return column

    def __repr__(self) -> str:
        return f"<{type(self).__name__}({self.family.value})>"


@dataclass(frozen=True, eq=False, repr=False)
class MySQLDialectDescriptor(DialectDescriptor):
    """
    MySQL / MariaDB.

    No `ON CONFLICT`: duplicates are skipped with `INSERT IGNORE`. BLOB-typed key columns
    can only be indexed over a bounded prefix, so OBJ_ID key columns get an explicit length.
    """

    obj_id_key_prefix: int = 255

    def wrap_insert(self, sql: str) -> str:
        if _INSERT_IGNORE_INTO.match(sql):
            return sql
        _require_insert(sql)
        return _INSERT_INTO.sub(r"\1INSERT IGNORE INTO", sql, count=1)

    def primary_key_column(self, column: str, logical: LogicalColumnType) -> str:
        if logical is LogicalColumnType.OBJ_ID:
            return f"{column}({self.obj_id_key_prefix})"
        return column


__all__ = [
    "ErrorCategory",
    "DialectFamily",
    "DialectDescriptor",
    "MySQLDialectDescriptor",
]
