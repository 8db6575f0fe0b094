"""
Logical column types used by the catalog store schema.

The schema never names a native SQL type directly. Every column is declared with one of the
`LogicalColumnType` members below and each dialect descriptor translates it into a
`ColumnType`: the DDL keyword for `CREATE TABLE` plus the SQLAlchemy type used to bind
values of that column.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from sqlalchemy.types import TypeEngine


class LogicalColumnType(str, Enum):
    """Closed set of column kinds. Never extended at runtime."""

    NAME = "name"              # repository ids, reference names; sort order matters
    OBJ_ID = "obj_id"          # content-address (hash) bytes
    BOOL = "bool"
    VARBINARY = "varbinary"    # serialized payloads
    BIGINT = "bigint"          # always signed 64 bit
    VARCHAR = "varchar"        # generic text


class ColumnType(NamedTuple):
    """
    Native rendering of a logical column type.

    - keyword: type text used in DDL, e.g. "VARCHAR COLLATE ucs_basic"
    - type_code: SQLAlchemy type class used for bind parameters of the column
    """

    keyword: str
    type_code: type[TypeEngine]


__all__ = ["LogicalColumnType", "ColumnType"]
