"""Core components for Bureaucrat."""

from bureaucrat.core.connection import DatabaseConnection
from bureaucrat.core.types import CachePolicy, EntityMeta, FieldMeta, FieldType, TitleFormat

__all__ = [
    "DatabaseConnection",
    "FieldType",
    "FieldMeta",
    "EntityMeta",
    "TitleFormat",
    "CachePolicy",
]
