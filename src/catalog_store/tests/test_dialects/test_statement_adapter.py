import pytest
from sqlalchemy import text

from catalog_store.dialects import (
    ALL_DIALECTS,
    COCKROACHDB,
    MYSQL,
    POSTGRESQL,
    SQLITE,
    LogicalColumnType,
)

INSERT = "INSERT INTO objs (repo_id, obj_id) VALUES (:repo_id, :obj_id)"


class TestWrapInsert:

    @pytest.mark.parametrize("dialect", [POSTGRESQL, COCKROACHDB, SQLITE], ids=lambda d: d.name)
    def test_on_conflict_do_nothing(self, dialect):
        assert dialect.wrap_insert(INSERT) == INSERT + " ON CONFLICT DO NOTHING"

    def test_trailing_semicolon_and_whitespace(self):
        assert POSTGRESQL.wrap_insert(INSERT + ";  \n") == INSERT + " ON CONFLICT DO NOTHING"

    def test_mysql_insert_ignore(self):
        assert MYSQL.wrap_insert(INSERT) == (
            "INSERT IGNORE INTO objs (repo_id, obj_id) VALUES (:repo_id, :obj_id)"
        )

    def test_mysql_only_rewrites_the_leading_keyword(self):
        sql = "  insert   into t (note) VALUES ('INSERT INTO x')"
        assert MYSQL.wrap_insert(sql) == "  INSERT IGNORE INTO t (note) VALUES ('INSERT INTO x')"

    @pytest.mark.parametrize("dialect", ALL_DIALECTS, ids=lambda d: d.name)
    @pytest.mark.parametrize("sql", ["UPDATE objs SET x = 1", "SELECT 1", "", "INSERTINTO objs"])
    def test_non_insert_is_rejected(self, dialect, sql):
        with pytest.raises(ValueError):
            dialect.wrap_insert(sql)

    @pytest.mark.parametrize("dialect", ALL_DIALECTS, ids=lambda d: d.name)
    def test_wrapping_twice_changes_nothing(self, dialect):
        once = dialect.wrap_insert(INSERT)
        assert dialect.wrap_insert(once) == once

    def test_already_adapted_statement_is_left_as_is(self):
        assert POSTGRESQL.wrap_insert(INSERT + " on conflict do nothing;") == (
            INSERT + " on conflict do nothing;"
        )
        assert MYSQL.wrap_insert("insert ignore into t (a) VALUES (1)") == "insert ignore into t (a) VALUES (1)"

    def test_wrapped_insert_is_idempotent_on_sqlite(self, sqlite_conn):
        sqlite_conn.execute(text(
            "CREATE TABLE objs (repo_id VARCHAR, obj_id BLOB, PRIMARY KEY (repo_id, obj_id))"
        ))
        stmt = text(SQLITE.wrap_insert(INSERT))
        row = {"repo_id": "repo", "obj_id": b"\x01\x02"}

        first = sqlite_conn.execute(stmt, row)
        second = sqlite_conn.execute(stmt, row)

        assert first.rowcount == 1
        assert second.rowcount == 0
        assert sqlite_conn.execute(text("SELECT COUNT(*) FROM objs")).scalar_one() == 1


class TestPrimaryKeyColumn:

    def test_mysql_obj_id_gets_a_prefix_length(self):
        assert MYSQL.primary_key_column("obj_id", LogicalColumnType.OBJ_ID) == "obj_id(255)"

    @pytest.mark.parametrize("logical", [t for t in LogicalColumnType if t is not LogicalColumnType.OBJ_ID])
    def test_mysql_other_types_unchanged(self, logical):
        assert MYSQL.primary_key_column("repo_id", logical) == "repo_id"

    @pytest.mark.parametrize("dialect", [POSTGRESQL, COCKROACHDB, SQLITE], ids=lambda d: d.name)
    @pytest.mark.parametrize("logical", list(LogicalColumnType))
    def test_other_dialects_unchanged(self, dialect, logical):
        assert dialect.primary_key_column("obj_id", logical) == "obj_id"
