"""Metadata store for Bureaucrat."""

from bureaucrat.schema.engine import MetadataStore
from bureaucrat.schema.models import EntityTypeRecord, FieldTypeRecord

__all__ = [
    "MetadataStore",
    "EntityTypeRecord",
    "FieldTypeRecord",
]
