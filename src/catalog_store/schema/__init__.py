from .tables import Column, Table, REFS, OBJS, TABLES
from .ddl import create_table_sql, insert_sql, insert_statement, initialize_schema

__all__ = [
    "Column",
    "Table",
    "REFS",
    "OBJS",
    "TABLES",
    "create_table_sql",
    "insert_sql",
    "insert_statement",
    "initialize_schema",
]
