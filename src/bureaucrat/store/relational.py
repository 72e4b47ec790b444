"""SQLAlchemy implementation of the relational store."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.types import NullType

from bureaucrat.exceptions import QueryError
from bureaucrat.store.base import ColumnInfo, ExecuteResult, RelationalStore

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

    from bureaucrat.core.connection import DatabaseConnection

logger = logging.getLogger(__name__)

INSERT_TARGET = re.compile(r'^\s*INSERT\s+INTO\s+("(?:[^"]|"")+")', re.IGNORECASE)


def to_driver_sql(sql: str, params: Sequence[Any], paramstyle: str) -> tuple[str, Any]:
    """Translate ``?`` placeholders into a DB-API paramstyle.

    Placeholders inside quoted identifiers or string literals are left alone.
    For the format styles every literal ``%`` is doubled, unless there are no
    parameters: the driver then runs the statement without substitution.

    Args:
        sql: Statement using ``?`` placeholders
        params: Positional parameters
        paramstyle: DB-API paramstyle of the driver

    Returns:
        Tuple of (driver statement, driver parameters)
    """
    params = tuple(params)
    if paramstyle == "qmark" or not params:
        return sql, params

    out: list[str] = []
    quote: str | None = None
    index = 0
    for char in sql:
        if quote:
            if char == quote:
                quote = None
        elif char in ('"', "'", "`"):
            quote = char
        elif char == "?":
            if paramstyle in ("format", "pyformat"):
                out.append("%s")
            elif paramstyle == "numeric":
                out.append(f":{index + 1}")
            elif paramstyle == "named":
                out.append(f":p{index}")
            else:
                raise QueryError(f"Unsupported paramstyle: {paramstyle}")
            index += 1
            continue
        if char == "%" and paramstyle in ("format", "pyformat"):
            out.append("%%")
        else:
            out.append(char)

    if paramstyle == "named":
        return "".join(out), {f"p{i}": value for i, value in enumerate(params)}
    return "".join(out), params


def _sqlite_last_id(conn: Connection, sql: str, rowid: int | None) -> int | None:
    """SQLite's lastrowid, when it is the inserted row's key.

    Only a single ``INTEGER PRIMARY KEY`` column aliases the rowid; for any
    other key (``BIGINT PRIMARY KEY``, composite keys) the rowid is unrelated.
    """
    match = INSERT_TARGET.match(sql)
    if match is None or rowid is None:
        return rowid
    columns = conn.exec_driver_sql(f"PRAGMA table_info({match.group(1)})").mappings().all()
    keys = [c for c in columns if c["pk"]]
    if len(keys) == 1 and str(keys[0]["type"]).upper() == "INTEGER":
        return rowid
    return None


class SQLAlchemyStore(RelationalStore):
    """Relational store backed by a SQLAlchemy engine.

    Schema discovery goes through SQLAlchemy's inspector; statements are
    passed to the driver as-is, after placeholder translation.
    """

    def __init__(self, connection: DatabaseConnection) -> None:
        """Initialize the store.

        Args:
            connection: Connection to the domain database
        """
        self._connection = connection

    @property
    def connection(self) -> DatabaseConnection:
        """The underlying database connection."""
        return self._connection

    def list_tables(self) -> list[str]:
        """List table names (SQLite internal tables are already excluded)."""
        try:
            return list(inspect(self._connection.engine).get_table_names())
        except SQLAlchemyError as e:
            raise QueryError(f"Failed to list tables: {e}") from e

    def describe_columns(self, table: str) -> list[ColumnInfo]:
        """Describe a table's columns in physical order."""
        engine = self._connection.engine
        try:
            inspector = inspect(engine)
            columns = inspector.get_columns(table)
            primary_key = set(inspector.get_pk_constraint(table).get("constrained_columns") or [])
        except SQLAlchemyError as e:
            raise QueryError(f"Failed to describe table '{table}': {e}", {"table": table}) from e

        result = []
        for column in columns:
            column_type = column["type"]
            if isinstance(column_type, NullType):
                # Column declared without a type
                native_type = ""
            else:
                native_type = column_type.compile(dialect=engine.dialect)
            result.append(
                ColumnInfo(
                    name=column["name"],
                    native_type=native_type,
                    is_primary_key=column["name"] in primary_key,
                    is_not_null=not column.get("nullable", True),
                )
            )
        return result

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run a query and return rows keyed by column name."""
        engine = self._connection.engine
        driver_sql, driver_params = to_driver_sql(sql, params, engine.dialect.paramstyle)
        logger.debug(f"Query: {sql} {tuple(params)}")
        try:
            with engine.connect() as conn:
                result = conn.exec_driver_sql(driver_sql, driver_params)
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            raise QueryError(f"Query failed: {e}", {"sql": sql}) from e

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult:
        """Run a data-changing statement in its own transaction."""
        engine = self._connection.engine
        driver_sql, driver_params = to_driver_sql(sql, params, engine.dialect.paramstyle)
        logger.debug(f"Execute: {sql} {tuple(params)}")
        try:
            with engine.begin() as conn:
                result = conn.exec_driver_sql(driver_sql, driver_params)
                affected = result.rowcount
                # lastrowid is only meaningful for SQLite here
                last_id = None
                if engine.dialect.name == "sqlite":
                    last_id = _sqlite_last_id(conn, sql, result.lastrowid)
                return ExecuteResult(affected_row_count=affected, last_inserted_id=last_id)
        except SQLAlchemyError as e:
            raise QueryError(f"Statement failed: {e}", {"sql": sql}) from e

    def close(self) -> None:
        """Dispose of the underlying engine."""
        self._connection.close()
