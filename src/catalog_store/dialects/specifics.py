"""
Concrete dialect descriptors, one per supported engine family.

All engine-specific knowledge is table data in this module: native type keywords, the
SQLAlchemy type used for binds, and the vendor error codes the classifier recognizes.

Error code references:
  - PostgreSQL SQLSTATEs: https://www.postgresql.org/docs/current/errcodes-appendix.html
  - CockroachDB retries: https://www.cockroachlabs.com/docs/stable/transaction-retry-error-reference
  - SQLite extended result codes: https://www.sqlite.org/rescode.html
  - MySQL server errors: https://dev.mysql.com/doc/mysql-errors/8.0/en/server-error-reference.html
"""

from __future__ import annotations

from sqlalchemy import types as sa_types
from sqlalchemy.dialects.mysql import BIT

from .column_types import ColumnType, LogicalColumnType
from .descriptor import DialectDescriptor, DialectFamily, MySQLDialectDescriptor

# =================================================================================================================
# PostgreSQL family (PostgreSQL, CockroachDB)
# =================================================================================================================

# unique_violation, shared by PostgreSQL and CockroachDB
PG_UNIQUE_VIOLATION = "23505"
# deadlock_detected
PG_DEADLOCK_DETECTED = "40P01"
# serialization_failure; CockroachDB reports every "restart transaction" error with it
PG_SERIALIZATION_FAILURE = "40001"
# duplicate_table
PG_DUPLICATE_TABLE = "42P07"


def _postgres_family_types(text_keyword: str) -> dict[LogicalColumnType, ColumnType]:
    return {
        LogicalColumnType.NAME: ColumnType(text_keyword, sa_types.VARCHAR),
        LogicalColumnType.OBJ_ID: ColumnType("BYTEA", sa_types.BINARY),
        LogicalColumnType.BOOL: ColumnType("BOOLEAN", sa_types.BOOLEAN),
        LogicalColumnType.VARBINARY: ColumnType("BYTEA", sa_types.BINARY),
        LogicalColumnType.BIGINT: ColumnType("BIGINT", sa_types.BIGINT),
        LogicalColumnType.VARCHAR: ColumnType(text_keyword, sa_types.VARCHAR),
    }


# The default PostgreSQL collation depends on the server locale and may ignore runs of
# spaces, so 'ref-    2' could sort after 'ref-   19'. ucs_basic compares by code point and
# keeps padded reference names in the expected order:
#   'ref-    1', 'ref-    2', 'ref-    9', 'ref-   10', 'ref-   19', 'ref-   20'
POSTGRESQL = DialectDescriptor(
    family=DialectFamily.POSTGRESQL,
    column_types=_postgres_family_types("VARCHAR COLLATE ucs_basic"),
    constraint_violation_codes=frozenset({PG_UNIQUE_VIOLATION}),
    retry_codes=frozenset({PG_DEADLOCK_DETECTED, PG_SERIALIZATION_FAILURE}),
    already_exists_codes=frozenset({PG_DUPLICATE_TABLE}),
)

# CockroachDB compares strings byte-wise already. It has no 40P01: contention surfaces as 40001.
COCKROACHDB = DialectDescriptor(
    family=DialectFamily.COCKROACHDB,
    column_types=_postgres_family_types("VARCHAR"),
    constraint_violation_codes=frozenset({PG_UNIQUE_VIOLATION}),
    retry_codes=frozenset({PG_SERIALIZATION_FAILURE}),
    already_exists_codes=frozenset({PG_DUPLICATE_TABLE}),
)

# =================================================================================================================
# Embedded (SQLite)
# =================================================================================================================

# SQLite reports errors by result-code name (sqlite3.Error.sqlite_errorname).
SQLITE_CONSTRAINT_UNIQUE = "SQLITE_CONSTRAINT_UNIQUE"
SQLITE_CONSTRAINT_PRIMARYKEY = "SQLITE_CONSTRAINT_PRIMARYKEY"
SQLITE_BUSY = "SQLITE_BUSY"
SQLITE_BUSY_SNAPSHOT = "SQLITE_BUSY_SNAPSHOT"
SQLITE_LOCKED = "SQLITE_LOCKED"

# BINARY is SQLite's default collation (memcmp), so plain VARCHAR sorts deterministically.
# "table already exists" comes back as the generic SQLITE_ERROR, which also covers syntax
# errors, so it is not classified. Schema creation uses IF NOT EXISTS instead.
SQLITE = DialectDescriptor(
    family=DialectFamily.SQLITE,
    column_types={
        LogicalColumnType.NAME: ColumnType("VARCHAR", sa_types.VARCHAR),
        LogicalColumnType.OBJ_ID: ColumnType("BLOB", sa_types.VARBINARY),
        LogicalColumnType.BOOL: ColumnType("BOOLEAN", sa_types.BOOLEAN),
        LogicalColumnType.VARBINARY: ColumnType("BLOB", sa_types.BLOB),
        LogicalColumnType.BIGINT: ColumnType("BIGINT", sa_types.BIGINT),
        LogicalColumnType.VARCHAR: ColumnType("VARCHAR", sa_types.VARCHAR),
    },
    constraint_violation_codes=frozenset({SQLITE_CONSTRAINT_UNIQUE, SQLITE_CONSTRAINT_PRIMARYKEY}),
    retry_codes=frozenset({SQLITE_BUSY, SQLITE_BUSY_SNAPSHOT, SQLITE_LOCKED}),
    already_exists_codes=frozenset(),
)

# =================================================================================================================
# MySQL family (MySQL, MariaDB)
# =================================================================================================================

# 23000 is the generic integrity-constraint SQLSTATE: besides ER_DUP_ENTRY it also covers
# NOT NULL and foreign key failures.
MYSQL_CONSTRAINT_VIOLATION = "23000"
# ER_LOCK_DEADLOCK
MYSQL_LOCK_DEADLOCK = "40001"
# ER_TABLE_EXISTS_ERROR
MYSQL_TABLE_EXISTS = "42S01"

_MYSQL_NAME = "VARCHAR(255) CHARACTER SET utf8mb4 COLLATE utf8mb4_bin"
_MYSQL_TEXT = "LONGTEXT CHARACTER SET utf8mb4 COLLATE utf8mb4_bin"

MYSQL = MySQLDialectDescriptor(
    family=DialectFamily.MYSQL,
    column_types={
        LogicalColumnType.NAME: ColumnType(_MYSQL_NAME, sa_types.VARCHAR),
        # TINYBLOB holds up to 255 bytes, enough for any supported hash
        LogicalColumnType.OBJ_ID: ColumnType("TINYBLOB", sa_types.VARBINARY),
        LogicalColumnType.BOOL: ColumnType("BIT(1)", BIT),
        # no length limit on payloads, matching LONGTEXT for VARCHAR
        LogicalColumnType.VARBINARY: ColumnType("LONGBLOB", sa_types.BLOB),
        LogicalColumnType.BIGINT: ColumnType("BIGINT", sa_types.BIGINT),
        LogicalColumnType.VARCHAR: ColumnType(_MYSQL_TEXT, sa_types.TEXT),
    },
    constraint_violation_codes=frozenset({MYSQL_CONSTRAINT_VIOLATION}),
    retry_codes=frozenset({MYSQL_LOCK_DEADLOCK}),
    already_exists_codes=frozenset({MYSQL_TABLE_EXISTS}),
)


ALL_DIALECTS: tuple[DialectDescriptor, ...] = (POSTGRESQL, COCKROACHDB, SQLITE, MYSQL)


__all__ = [
    "POSTGRESQL",
    "COCKROACHDB",
    "SQLITE",
    "MYSQL",
    "ALL_DIALECTS",
]
