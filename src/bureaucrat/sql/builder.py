"""Parameterized SQL statement builders.

Builders are immutable: every fluent call returns a new builder, so a partly
built statement can be shared and extended without side effects.

Ex::

    stmt = Select().from_("user").where("id", 1).limit(1)
    rendered = stmt.render()
    rendered.sql     # 'SELECT *\\nFROM "user"\\nWHERE "id" = ?\\nLIMIT ?'
    rendered.params  # (1, 1)

Table and column names are quoted but never validated. Only pass identifiers
taken from trusted metadata, never raw user input.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from bureaucrat.exceptions import (
    ClauseAlreadySetError,
    FromNotSetError,
    IntoNotSetError,
    InvalidLimitError,
    NoAttributionsSetError,
    NoFieldsSetError,
    NoWhereRestrictionsError,
    NullNotAcceptedError,
    TableNotSetError,
)

if TYPE_CHECKING:
    from bureaucrat.store.base import ExecuteResult, RelationalStore

PLACEHOLDER = "?"


def quote_identifier(name: str) -> str:
    """Quote a table or column name, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


@dataclass(frozen=True)
class RenderedSQL:
    """A statement ready to be handed to a relational store."""

    sql: str
    params: tuple[Any, ...] = ()


EMPTY = RenderedSQL("")


def merge(parts: Iterable[RenderedSQL]) -> RenderedSQL:
    """Join rendered clauses line by line, concatenating their params in order."""
    parts = list(parts)
    return RenderedSQL(
        sql="\n".join(p.sql for p in parts if p.sql),
        params=tuple(param for p in parts for param in p.params),
    )


@dataclass(frozen=True)
class Where:
    """WHERE clause: equality restrictions combined with AND."""

    restrictions: tuple[tuple[str, Any], ...] = ()

    def equal(self, column: str, value: Any, accept_null: bool = False) -> Where:
        """Add an equality restriction.

        Args:
            column: Column name
            value: Value to compare with
            accept_null: Allow ``None``, rendered as ``IS NULL``

        Raises:
            NullNotAcceptedError: If value is None and accept_null is False
        """
        if value is None and not accept_null:
            raise NullNotAcceptedError(column)
        return replace(self, restrictions=(*self.restrictions, (column, value)))

    def __len__(self) -> int:
        return len(self.restrictions)

    def render(self, required: bool = True) -> RenderedSQL:
        if not self.restrictions:
            if not required:
                return EMPTY
            raise NoWhereRestrictionsError()

        conditions = []
        params = []
        for column, value in self.restrictions:
            if value is None:
                conditions.append(f"{quote_identifier(column)} IS NULL")
            else:
                conditions.append(f"{quote_identifier(column)} = {PLACEHOLDER}")
                params.append(value)
        return RenderedSQL("WHERE " + " AND ".join(conditions), tuple(params))


@dataclass(frozen=True)
class Attribution:
    """SET clause: one or more column assignments."""

    assignments: tuple[tuple[str, Any], ...] = ()

    def set(self, column: str, value: Any) -> Attribution:
        """Assign a value to a column. ``None`` sets NULL."""
        return replace(self, assignments=(*self.assignments, (column, value)))

    def __len__(self) -> int:
        return len(self.assignments)

    def render(self) -> RenderedSQL:
        if not self.assignments:
            raise NoAttributionsSetError()
        sql = "SET " + ", ".join(
            f"{quote_identifier(column)} = {PLACEHOLDER}" for column, _ in self.assignments
        )
        return RenderedSQL(sql, tuple(value for _, value in self.assignments))


@dataclass(frozen=True)
class Select:
    """Builder for SELECT queries."""

    source: str | None = None
    projection: tuple[str, ...] = ()
    restrictions: Where = field(default_factory=Where)
    row_limit: int | None = None

    def from_(self, table: str) -> Select:
        """Table to fetch rows from. Mandatory, may be set only once."""
        if self.source is not None:
            raise ClauseAlreadySetError("FROM")
        return replace(self, source=table)

    def select(self, *columns: str) -> Select:
        """Restrict the projection to the given columns (default ``*``)."""
        if self.projection:
            raise ClauseAlreadySetError("SELECT")
        return replace(self, projection=tuple(columns))

    def where(self, column: str, value: Any, accept_null: bool = False) -> Select:
        """Add an equality restriction, ANDed with previous ones."""
        return replace(self, restrictions=self.restrictions.equal(column, value, accept_null))

    def limit(self, rows: int) -> Select:
        """Limit the number of rows returned."""
        if self.row_limit is not None:
            raise ClauseAlreadySetError("LIMIT")
        if isinstance(rows, bool) or not isinstance(rows, int) or rows < 0:
            raise InvalidLimitError(rows)
        return replace(self, row_limit=rows)

    def render(self) -> RenderedSQL:
        if self.source is None:
            raise FromNotSetError()

        columns = ", ".join(quote_identifier(c) for c in self.projection) or "*"
        return merge(
            [
                RenderedSQL(f"SELECT {columns}"),
                RenderedSQL(f"FROM {quote_identifier(self.source)}"),
                self.restrictions.render(required=False),
                RenderedSQL(f"LIMIT {PLACEHOLDER}", (self.row_limit,))
                if self.row_limit is not None
                else EMPTY,
            ]
        )

    def query(self, store: RelationalStore) -> list[dict[str, Any]]:
        """Render and run the query on the given store."""
        rendered = self.render()
        return store.query(rendered.sql, rendered.params)


@dataclass(frozen=True)
class Insert:
    """Builder for INSERT INTO statements."""

    target: str | None = None
    values: Attribution = field(default_factory=Attribution)

    def into(self, table: str) -> Insert:
        """Table to insert the row into. Mandatory, may be set only once."""
        if self.target is not None:
            raise ClauseAlreadySetError("INTO")
        return replace(self, target=table)

    def set(self, column: str, value: Any) -> Insert:
        """Value of one column of the new row."""
        return replace(self, values=self.values.set(column, value))

    def render(self) -> RenderedSQL:
        if self.target is None:
            raise IntoNotSetError()
        if not self.values:
            raise NoFieldsSetError()

        columns = ", ".join(quote_identifier(c) for c, _ in self.values.assignments)
        placeholders = ", ".join(PLACEHOLDER for _ in self.values.assignments)
        return RenderedSQL(
            f"INSERT INTO {quote_identifier(self.target)}({columns}) VALUES ({placeholders})",
            tuple(v for _, v in self.values.assignments),
        )

    def execute(self, store: RelationalStore) -> ExecuteResult:
        """Render and run the statement on the given store."""
        rendered = self.render()
        return store.execute(rendered.sql, rendered.params)


@dataclass(frozen=True)
class Update:
    """Builder for UPDATE statements."""

    target: str | None = None
    attributions: Attribution = field(default_factory=Attribution)
    restrictions: Where = field(default_factory=Where)

    def table(self, table: str) -> Update:
        """Table holding the row to update. Mandatory, may be set only once."""
        if self.target is not None:
            raise ClauseAlreadySetError("TABLE")
        return replace(self, target=table)

    def set(self, column: str, value: Any) -> Update:
        """Assign a new value to a column. At least one is required."""
        return replace(self, attributions=self.attributions.set(column, value))

    def where(self, column: str, value: Any, accept_null: bool = False) -> Update:
        """Add an equality restriction. At least one is required."""
        return replace(self, restrictions=self.restrictions.equal(column, value, accept_null))

    def render(self) -> RenderedSQL:
        if self.target is None:
            raise TableNotSetError()
        return merge(
            [
                RenderedSQL(f"UPDATE {quote_identifier(self.target)}"),
                self.attributions.render(),
                self.restrictions.render(required=True),
            ]
        )

    def execute(self, store: RelationalStore) -> ExecuteResult:
        """Render and run the statement on the given store."""
        rendered = self.render()
        return store.execute(rendered.sql, rendered.params)


@dataclass(frozen=True)
class Delete:
    """Builder for DELETE statements."""

    target: str | None = None
    restrictions: Where = field(default_factory=Where)

    def table(self, table: str) -> Delete:
        """Table holding the row to delete. Mandatory, may be set only once."""
        if self.target is not None:
            raise ClauseAlreadySetError("TABLE")
        return replace(self, target=table)

    def where(self, column: str, value: Any, accept_null: bool = False) -> Delete:
        """Add an equality restriction. At least one is required."""
        return replace(self, restrictions=self.restrictions.equal(column, value, accept_null))

    def render(self) -> RenderedSQL:
        if self.target is None:
            raise TableNotSetError()
        return merge(
            [
                RenderedSQL(f"DELETE FROM {quote_identifier(self.target)}"),
                self.restrictions.render(required=True),
            ]
        )

    def execute(self, store: RelationalStore) -> ExecuteResult:
        """Render and run the statement on the given store."""
        rendered = self.render()
        return store.execute(rendered.sql, rendered.params)
