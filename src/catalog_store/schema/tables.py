"""
The catalog's tables, described as data. DDL and statements are rendered per dialect in
`catalog_store.schema.ddl`.
"""

from __future__ import annotations

from dataclasses import dataclass

from catalog_store.dialects.column_types import LogicalColumnType


@dataclass(frozen=True)
class Column:
    name: str
    logical: LogicalColumnType


@dataclass(frozen=True)
class Table:
    name: str
    columns: tuple[Column, ...]
    primary_key: tuple[str, ...]

    def __post_init__(self) -> None:
        unknown = [c for c in self.primary_key if c not in self.column_names]
        if unknown:
            raise ValueError(f"{self.name}: primary key column(s) {unknown} not in table")

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.columns)

    def column(self, name: str) -> Column:
        for c in self.columns:
            if c.name == name:
                return c
        raise KeyError(f"{self.name} has no column {name!r}")


# Named references (branches, tags) and the pointer they currently hold.
REFS = Table(
    name="refs",
    columns=(
        Column("repo_id", LogicalColumnType.NAME),
        Column("ref_name", LogicalColumnType.NAME),
        Column("pointer", LogicalColumnType.OBJ_ID),
        Column("created_at", LogicalColumnType.BIGINT),
        Column("deleted", LogicalColumnType.BOOL),
        Column("ext_info", LogicalColumnType.VARBINARY),
        Column("prev_ptr", LogicalColumnType.OBJ_ID),
    ),
    primary_key=("repo_id", "ref_name"),
)

# Content-addressed objects; obj_id is the hash of the payload.
OBJS = Table(
    name="objs",
    columns=(
        Column("repo_id", LogicalColumnType.NAME),
        Column("obj_id", LogicalColumnType.OBJ_ID),
        Column("obj_type", LogicalColumnType.NAME),
        Column("obj_vers", LogicalColumnType.VARCHAR),
        Column("payload", LogicalColumnType.VARBINARY),
        Column("created_at", LogicalColumnType.BIGINT),
    ),
    primary_key=("repo_id", "obj_id"),
)

TABLES: tuple[Table, ...] = (REFS, OBJS)

__all__ = ["Column", "Table", "REFS", "OBJS", "TABLES"]
