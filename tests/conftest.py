"""Shared test fixtures for Bureaucrat."""

from collections.abc import Generator, Sequence
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import create_engine, text

from bureaucrat import DataDomain
from bureaucrat.store.base import ColumnInfo, ExecuteResult, RelationalStore

USERS = [
    ("Douglas", "Noël", "Adams", "1767-07-11"),
    ("John", "Marwood", "Cleese", "1939-10-27"),
    ("Rowan", "Sebastian", "Atkinson", "1955-01-06"),
    ("Isaac", "", "Asimov", "1920-01-02"),
    ("Mary", "Wollstonecraft", "Shelley", "1797-08-30"),
]

FEATURES = [
    ("CreateUser", "user"),
    ("ReadUser", "user"),
    ("UpdateUser", "user"),
    ("DeleteUser", "user"),
]


def seed_example_domain(url: str, users: bool = True) -> None:
    """Create the example ``user`` and ``feature`` tables, optionally with rows."""
    engine = create_engine(url)
    with engine.begin() as conn:
        conn.execute(
            text(
                """
                CREATE TABLE user (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    first_name TEXT,
                    middle_name TEXT,
                    last_name TEXT,
                    birth_date TEXT
                )
                """
            )
        )
        conn.execute(
            text(
                """
                CREATE TABLE feature (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    path TEXT
                )
                """
            )
        )
        if users:
            for first, middle, last, birth in USERS:
                conn.execute(
                    text(
                        "INSERT INTO user (first_name, middle_name, last_name, birth_date) "
                        "VALUES (:first, :middle, :last, :birth)"
                    ),
                    {"first": first, "middle": middle, "last": last, "birth": birth},
                )
            for name, path in FEATURES:
                conn.execute(
                    text("INSERT INTO feature (name, path) VALUES (:name, :path)"),
                    {"name": name, "path": path},
                )
    engine.dispose()


@pytest.fixture
def meta_url(tmp_path: Path) -> str:
    """Temporary SQLite file for the metadata store."""
    return f"sqlite:///{tmp_path / 'meta.db'}"


@pytest.fixture
def domain_url(tmp_path: Path) -> str:
    """Temporary SQLite file for the domain store, seeded with example data."""
    url = f"sqlite:///{tmp_path / 'domain.db'}"
    seed_example_domain(url)
    return url


@pytest.fixture
def empty_domain_url(tmp_path: Path) -> str:
    """Temporary SQLite file for a domain store with example tables but no rows."""
    url = f"sqlite:///{tmp_path / 'empty_domain.db'}"
    seed_example_domain(url, users=False)
    return url


@pytest.fixture
def data_domain(meta_url: str, domain_url: str) -> Generator[DataDomain, None, None]:
    """Data domain over the seeded example database."""
    domain = DataDomain(meta_url, domain_url)
    yield domain
    domain.close()


class FakeStore(RelationalStore):
    """In-memory relational store recording every statement it receives.

    Tables are given as ``{table: (columns, rows)}``.
    """

    def __init__(
        self,
        tables: dict[str, tuple[list[ColumnInfo], list[dict[str, Any]]]] | None = None,
        rowcount: int = 1,
        last_inserted_id: int | None = None,
    ) -> None:
        self.tables = tables or {}
        self.rowcount = rowcount
        self.last_inserted_id = last_inserted_id
        self.queries: list[tuple[str, tuple[Any, ...]]] = []
        self.statements: list[tuple[str, tuple[Any, ...]]] = []

    def list_tables(self) -> list[str]:
        return list(self.tables)

    def describe_columns(self, table: str) -> list[ColumnInfo]:
        return self.tables[table][0]

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        self.queries.append((sql, tuple(params)))
        for table, (_, rows) in self.tables.items():
            if f'FROM "{table}"' in sql:
                return [dict(row) for row in rows]
        return []

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult:
        self.statements.append((sql, tuple(params)))
        return ExecuteResult(self.rowcount, self.last_inserted_id)


@pytest.fixture
def user_columns() -> list[ColumnInfo]:
    """Columns of the example user table as SQLite reports them."""
    return [
        ColumnInfo("id", "INTEGER", is_primary_key=True),
        ColumnInfo("first_name", "TEXT"),
        ColumnInfo("middle_name", "TEXT"),
        ColumnInfo("last_name", "TEXT"),
        ColumnInfo("birth_date", "TEXT"),
    ]


@pytest.fixture
def make_store() -> type[FakeStore]:
    """Factory for recording in-memory stores."""
    return FakeStore
