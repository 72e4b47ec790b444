"""Bureaucrat - metadata-driven data access for relational databases.

Bureaucrat inspects an existing relational database, infers an editable
entity/field model from its tables and persists that model in a separate
metadata store. Generic create/read/update/delete operations are then driven
by the metadata, keyed by field codes rather than physical column names.

Example:
    from bureaucrat import DataDomain

    domain = DataDomain("sqlite:///./meta.db", "sqlite:///./app.db")

    # Discover entities (introspected on first call, persisted afterwards)
    for entity_type in domain.entity_types():
        print(entity_type.code, entity_type.field_codes)

    # CRUD by entity code and field codes
    user = domain.create("user", {"first_name": "Douglas", "last_name": "Adams"})
    domain.update("user", {"id": user["id"], "middle_name": "Noël"})
    domain.read("user", ids={"id": user["id"]})
    domain.delete("user", {"id": user["id"]})
"""

from bureaucrat.core.cache import CacheState, EntityTypeCache
from bureaucrat.core.engine import DataDomain
from bureaucrat.core.types import CachePolicy, EntityMeta, FieldMeta, FieldType, TitleFormat
from bureaucrat.exceptions import (
    BureaucratError,
    ConnectionError,
    ConsistencyError,
    EntityTypeNotFoundError,
    InferenceError,
    MissingIdentifierFieldError,
    MissingIdentifierValueError,
    MissingMandatoryFieldError,
    NoIdentifierFieldsError,
    QueryError,
    SchemaChangeError,
    SQLBuilderError,
    UnexpectedAffectedRowCountError,
    UnexpectedReadCountError,
    UnknownFieldsError,
    UnsupportedColumnTypeError,
    ValidationError,
    ValueDecodeError,
)
from bureaucrat.sql import Delete, Insert, Select, Update
from bureaucrat.store import ColumnInfo, ExecuteResult, RelationalStore, SQLAlchemyStore

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "DataDomain",
    "EntityTypeCache",
    "CacheState",
    # Types
    "FieldType",
    "FieldMeta",
    "EntityMeta",
    "TitleFormat",
    "CachePolicy",
    # SQL builder
    "Select",
    "Insert",
    "Update",
    "Delete",
    # Relational stores
    "RelationalStore",
    "SQLAlchemyStore",
    "ColumnInfo",
    "ExecuteResult",
    # Exceptions
    "BureaucratError",
    "ConnectionError",
    "QueryError",
    "SchemaChangeError",
    "SQLBuilderError",
    "EntityTypeNotFoundError",
    "ValidationError",
    "UnknownFieldsError",
    "MissingMandatoryFieldError",
    "MissingIdentifierFieldError",
    "MissingIdentifierValueError",
    "NoIdentifierFieldsError",
    "ValueDecodeError",
    "InferenceError",
    "UnsupportedColumnTypeError",
    "ConsistencyError",
    "UnexpectedAffectedRowCountError",
    "UnexpectedReadCountError",
]
