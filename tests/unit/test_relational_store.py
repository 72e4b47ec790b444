"""Tests for the SQLAlchemy relational store."""

import pytest
from sqlalchemy import create_engine, text

from bureaucrat.core.connection import DatabaseConnection
from bureaucrat.exceptions import QueryError
from bureaucrat.sql.builder import Insert, Select
from bureaucrat.store.relational import SQLAlchemyStore, to_driver_sql


class TestToDriverSQL:
    """Tests for placeholder translation."""

    def test_qmark_unchanged(self):
        sql, params = to_driver_sql('SELECT * FROM "t" WHERE "a" = ?', [1], "qmark")
        assert sql == 'SELECT * FROM "t" WHERE "a" = ?'
        assert params == (1,)

    def test_format(self):
        sql, params = to_driver_sql('UPDATE "t" SET "a" = ? WHERE "b" = ?', ["x", 2], "format")
        assert sql == 'UPDATE "t" SET "a" = %s WHERE "b" = %s'
        assert params == ("x", 2)

    def test_pyformat_doubles_literal_percent(self):
        sql, _ = to_driver_sql('SELECT 100 % 7 FROM "t" WHERE "a" = ?', [1], "pyformat")
        assert sql == 'SELECT 100 %% 7 FROM "t" WHERE "a" = %s'

    def test_percent_kept_without_params(self):
        sql, params = to_driver_sql('SELECT * FROM "a%b"', [], "pyformat")
        assert sql == 'SELECT * FROM "a%b"'
        assert params == ()

    def test_numeric(self):
        sql, params = to_driver_sql("VALUES (?, ?)", [1, 2], "numeric")
        assert sql == "VALUES (:1, :2)"
        assert params == (1, 2)

    def test_named(self):
        sql, params = to_driver_sql("VALUES (?, ?)", ["a", "b"], "named")
        assert sql == "VALUES (:p0, :p1)"
        assert params == {"p0": "a", "p1": "b"}

    def test_quoted_question_marks_are_kept(self):
        sql, _ = to_driver_sql('SELECT "what?" FROM "t" WHERE "a" = \'?\' AND "b" = ?', [1], "format")
        assert sql == 'SELECT "what?" FROM "t" WHERE "a" = \'?\' AND "b" = %s'

    def test_unsupported_paramstyle(self):
        with pytest.raises(QueryError):
            to_driver_sql("VALUES (?)", [1], "bogus")


@pytest.fixture
def store(domain_url: str):
    """SQLAlchemy store over the seeded example database."""
    sqlalchemy_store = SQLAlchemyStore(DatabaseConnection(domain_url))
    yield sqlalchemy_store
    sqlalchemy_store.close()


class TestSQLAlchemyStore:
    """Tests for SQLAlchemyStore on SQLite."""

    def test_list_tables_skips_sqlite_internals(self, store):
        tables = store.list_tables()
        assert set(tables) == {"user", "feature"}
        assert "sqlite_sequence" not in tables

    def test_describe_columns(self, store):
        columns = store.describe_columns("feature")
        assert [c.name for c in columns] == ["id", "name", "path"]
        assert [c.native_type for c in columns] == ["INTEGER", "TEXT", "TEXT"]
        assert [c.is_primary_key for c in columns] == [True, False, False]
        assert columns[1].is_not_null is True
        assert columns[2].is_not_null is False

    def test_query_returns_rows_keyed_by_column(self, store):
        rows = Select().from_("user").where("last_name", "Adams").query(store)
        assert rows == [
            {
                "id": 1,
                "first_name": "Douglas",
                "middle_name": "Noël",
                "last_name": "Adams",
                "birth_date": "1767-07-11",
            }
        ]

    def test_execute_reports_last_inserted_id(self, store):
        result = Insert().into("feature").set("name", "ListUsers").execute(store)
        assert result.affected_row_count == 1
        assert result.last_inserted_id == 5

    def test_rowid_not_reported_for_non_alias_key(self, store, domain_url):
        engine = create_engine(domain_url)
        with engine.begin() as conn:
            conn.execute(text("CREATE TABLE ledger (id BIGINT PRIMARY KEY, note TEXT)"))
        engine.dispose()

        result = Insert().into("ledger").set("id", 42).set("note", "x").execute(store)
        assert result.affected_row_count == 1
        assert result.last_inserted_id is None

    def test_execute_commits(self, store):
        Insert().into("feature").set("name", "ListUsers").set("path", "user").execute(store)
        rows = Select().from_("feature").where("name", "ListUsers").query(store)
        assert rows[0]["path"] == "user"

    def test_failed_statement_raises_query_error(self, store):
        with pytest.raises(QueryError) as exc_info:
            Insert().into("feature").set("path", "no-name").execute(store)
        assert "sql" in exc_info.value.context

    def test_unknown_table_raises_query_error(self, store):
        with pytest.raises(QueryError):
            Select().from_("nope").query(store)
