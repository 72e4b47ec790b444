"""Relational store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ColumnInfo:
    """Physical description of one table column."""

    name: str
    native_type: str
    is_primary_key: bool = False
    is_not_null: bool = False


@dataclass(frozen=True)
class ExecuteResult:
    """Outcome of a data-changing statement."""

    affected_row_count: int
    last_inserted_id: int | None = None


class RelationalStore(ABC):
    """Minimal capability surface the data domain needs from a database.

    Statements use positional ``?`` placeholders. Implementations translate
    them to their driver's parameter style. Any failure is raised to the
    caller; implementations do not retry.
    """

    @abstractmethod
    def list_tables(self) -> list[str]:
        """List table names, excluding the store's internal bookkeeping tables."""
        ...

    @abstractmethod
    def describe_columns(self, table: str) -> list[ColumnInfo]:
        """Describe a table's columns in physical order."""
        ...

    @abstractmethod
    def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run a query and return rows keyed by column name."""
        ...

    @abstractmethod
    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult:
        """Run a data-changing statement and commit it."""
        ...

    def close(self) -> None:
        """Release any resources held by the store."""
        return None
