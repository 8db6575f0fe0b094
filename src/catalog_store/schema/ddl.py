import logging
from typing import Sequence

from sqlalchemy import bindparam, inspect, text
from sqlalchemy.sql.elements import TextClause

from catalog_store.dialects.descriptor import DialectDescriptor
from catalog_store.exceptions.base import AlreadyExistsError
from catalog_store.exceptions.mapper import db_error_handler

from .tables import TABLES, Table

logger = logging.getLogger(__name__)


def create_table_sql(table: Table, dialect: DialectDescriptor) -> str:
    """
    Render CREATE TABLE for `table` using the dialect's native type keywords.

    Engines that report "already exists" with a dedicated code get a plain CREATE TABLE
    (a concurrent creator is detected through the classifier). The others (SQLite) get
    IF NOT EXISTS.
    """
    if_not_exists = "" if dialect.already_exists_codes else "IF NOT EXISTS "
    columns = [f"    {c.name} {dialect.keyword_of(c.logical)}" for c in table.columns]
    pk = ", ".join(dialect.primary_key_column(name, table.column(name).logical) for name in table.primary_key)
    body = ",\n".join(columns + [f"    PRIMARY KEY ({pk})"])
    return f"CREATE TABLE {if_not_exists}{table.name} (\n{body}\n)"


def _select_columns(table: Table, columns: Sequence[str] | None) -> list[str]:
    if columns is None:
        return list(table.column_names)
    if not columns:
        raise ValueError("columns must not be empty")
    for name in columns:
        table.column(name)  # KeyError for unknown columns
    return list(columns)


def insert_sql(table: Table, columns: Sequence[str] | None = None) -> str:
    """Engine-neutral `INSERT INTO t (a, b) VALUES (:a, :b)`."""
    names = _select_columns(table, columns)
    return (
        f"INSERT INTO {table.name} ({', '.join(names)}) "
        f"VALUES ({', '.join(':' + n for n in names)})"
    )


def insert_statement(table: Table, dialect: DialectDescriptor, columns: Sequence[str] | None = None) -> TextClause:
    """
    Idempotent insert for `table`: rows whose primary key already exists are skipped.
    Bind parameters are typed with the dialect's type codes.

    Usage:
        conn.execute(insert_statement(OBJS, dialect), [{"repo_id": ..., "obj_id": ...}, ...])
    """
    names = _select_columns(table, columns)
    sql = dialect.wrap_insert(insert_sql(table, names))
    binds = [bindparam(n, type_=dialect.code_of(table.column(n).logical)) for n in names]
    return text(sql).bindparams(*binds)


def initialize_schema(conn, dialect: DialectDescriptor) -> list[str]:
    """
    Create every catalog table that does not exist yet and commit.

    Safe to run concurrently from several processes: a table created by someone else in
    between (ALREADY_EXISTS) counts as success.

    Returns:
        The names of the tables this call created.
    """
    created: list[str] = []
    for table in TABLES:
        if inspect(conn).has_table(table.name):
            logger.debug("schema.table_exists", extra={"table": table.name, "dialect": dialect.name})
            continue
        try:
            with db_error_handler(conn, dialect, f"create table {table.name}"):
                conn.execute(text(create_table_sql(table, dialect)))
                conn.commit()
        except AlreadyExistsError:
            logger.info("schema.table_created_concurrently", extra={"table": table.name, "dialect": dialect.name})
            continue
        created.append(table.name)
        logger.info("schema.table_created", extra={"table": table.name, "dialect": dialect.name})
    return created


__all__ = ["create_table_sql", "insert_sql", "insert_statement", "initialize_schema"]
