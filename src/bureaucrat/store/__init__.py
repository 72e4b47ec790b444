"""Relational store adapters."""

from bureaucrat.store.base import ColumnInfo, ExecuteResult, RelationalStore
from bureaucrat.store.relational import SQLAlchemyStore

__all__ = [
    "RelationalStore",
    "SQLAlchemyStore",
    "ColumnInfo",
    "ExecuteResult",
]
