"""Custom exceptions for Bureaucrat.

Every error raised by the data domain is a ``BureaucratError``:
- Messages say what went wrong and, where possible, what the valid options are
- ``context`` carries the same facts in machine-readable form
"""

from __future__ import annotations

from typing import Any


class BureaucratError(Exception):
    """Base exception for all Bureaucrat errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict for API consumers."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConnectionError(BureaucratError):
    """Failed to connect to the database."""

    pass


class QueryError(BureaucratError):
    """Statement execution failed in the relational store."""

    pass


class SchemaChangeError(BureaucratError):
    """Metadata store write failed."""

    pass


# === SQL builder misuse ===


class SQLBuilderError(BureaucratError):
    """A statement builder was used incorrectly."""

    pass


class _ClauseNotSetError(SQLBuilderError):
    clause = ""
    method = ""

    def __init__(self) -> None:
        super().__init__(
            f"{self.clause} clause not set. Call `{self.method}(...)` before rendering.",
            {"clause": self.clause},
        )


class FromNotSetError(_ClauseNotSetError):
    """SELECT rendered without a FROM table."""

    clause = "FROM"
    method = "from_"


class IntoNotSetError(_ClauseNotSetError):
    """INSERT rendered without a target table."""

    clause = "INTO"
    method = "into"


class TableNotSetError(_ClauseNotSetError):
    """UPDATE or DELETE rendered without a target table."""

    clause = "TABLE"
    method = "table"


class NoFieldsSetError(SQLBuilderError):
    """INSERT rendered without any column value."""

    def __init__(self) -> None:
        super().__init__("No field value set. Call `set(column, value)` at least once.")


class NoAttributionsSetError(SQLBuilderError):
    """UPDATE rendered with an empty SET clause."""

    def __init__(self) -> None:
        super().__init__(
            "No field attribution specified. Call `set(column, value)` at least once."
        )


class NoWhereRestrictionsError(SQLBuilderError):
    """UPDATE or DELETE rendered without a WHERE restriction."""

    def __init__(self) -> None:
        super().__init__(
            "WHERE clause must have at least one restriction. "
            "Call `where(column, value)` at least once."
        )


class ClauseAlreadySetError(SQLBuilderError):
    """A clause that may only be set once was set again."""

    def __init__(self, clause: str) -> None:
        super().__init__(
            f"{clause} clause cannot be set more than once.",
            {"clause": clause},
        )
        self.clause = clause


class NullNotAcceptedError(SQLBuilderError):
    """A None value was given to an equality restriction that rejects nulls."""

    def __init__(self, column: str) -> None:
        super().__init__(
            f"Column '{column}' cannot be compared to null. Pass accept_null=True to allow it.",
            {"column": column},
        )
        self.column = column


class InvalidLimitError(SQLBuilderError):
    """LIMIT must be a non-negative integer."""

    def __init__(self, limit: Any) -> None:
        super().__init__(
            f"Invalid limit {limit!r}. Expected a non-negative integer.",
            {"limit": limit},
        )
        self.limit = limit


# === Lookup ===


class EntityTypeNotFoundError(BureaucratError):
    """No entity type matches the given code."""

    def __init__(self, code: str, available_codes: list[str] | None = None) -> None:
        available = available_codes or []
        if available:
            message = (
                f"No entity type found for code '{code}'. "
                f"Available entity types: {', '.join(available)}"
            )
        else:
            message = f"No entity type found for code '{code}'. The data domain is empty."

        super().__init__(message, {"code": code, "available_codes": available})
        self.code = code
        self.available_codes = available


# === Input validation ===


class ValidationError(BureaucratError):
    """Data validation failed."""

    def __init__(self, message: str, field_errors: dict[str, str] | None = None) -> None:
        super().__init__(message, {"field_errors": field_errors or {}})
        self.field_errors = field_errors or {}


class UnknownFieldsError(ValidationError):
    """Data contains keys that match no field code of the entity type."""

    def __init__(
        self, entity_code: str, unknown: list[str], available_fields: list[str] | None = None
    ) -> None:
        available = available_fields or []
        message = (
            f"Unknown fields for '{entity_code}': {', '.join(unknown)}. "
            f"Available fields: {', '.join(available)}"
        )
        super().__init__(message, {code: "unknown field" for code in unknown})
        self.context.update({"entity_code": entity_code, "available_fields": available})
        self.entity_code = entity_code
        self.unknown = unknown
        self.available_fields = available


class MissingMandatoryFieldError(ValidationError):
    """A mandatory field was absent or None on creation."""

    def __init__(self, entity_code: str, field_code: str) -> None:
        super().__init__(
            f"Field '{field_code}' is mandatory for '{entity_code}' and must have a value.",
            {field_code: "mandatory"},
        )
        self.context["entity_code"] = entity_code
        self.entity_code = entity_code
        self.field_code = field_code


class MissingIdentifierFieldError(ValidationError):
    """A read by ids did not include one of the identifier fields."""

    def __init__(self, entity_code: str, field_code: str) -> None:
        super().__init__(
            f"The ids provided for '{entity_code}' do not define the identifier '{field_code}'.",
            {field_code: "missing identifier"},
        )
        self.context["entity_code"] = entity_code
        self.entity_code = entity_code
        self.field_code = field_code


class MissingIdentifierValueError(ValidationError):
    """An update or delete did not give a value for one of the identifier fields."""

    def __init__(self, entity_code: str, field_code: str) -> None:
        super().__init__(
            f"The data provided for '{entity_code}' does not define the identifier "
            f"'{field_code}'.",
            {field_code: "missing identifier value"},
        )
        self.context["entity_code"] = entity_code
        self.entity_code = entity_code
        self.field_code = field_code


class NoIdentifierFieldsError(ValidationError):
    """The entity type has no identifier fields, so single rows cannot be addressed."""

    def __init__(self, entity_code: str) -> None:
        super().__init__(
            f"Unable to uniquely identify a '{entity_code}' entity: it has no identifier fields."
        )
        self.context["entity_code"] = entity_code
        self.entity_code = entity_code


class ValueDecodeError(ValidationError):
    """A stored value could not be decoded into its field's semantic type."""

    def __init__(self, field_code: str, field_type: str, value: Any) -> None:
        super().__init__(
            f"Cannot decode {value!r} of field '{field_code}' as {field_type}.",
            {field_code: f"expected {field_type}"},
        )
        self.field_code = field_code
        self.field_type = field_type
        self.value = value


# === Inference ===


class InferenceError(BureaucratError):
    """Introspection could not infer metadata for a table."""

    pass


class UnsupportedColumnTypeError(InferenceError):
    """A column's native type has no semantic field type."""

    def __init__(
        self, table: str, column: str, native_type: str, supported: list[str] | None = None
    ) -> None:
        supported = supported or []
        message = (
            f"Unsupported column type '{native_type}' for '{table}.{column}'. "
            f"Supported types: {', '.join(supported)}"
        )
        super().__init__(
            message,
            {
                "table": table,
                "column": column,
                "native_type": native_type,
                "supported_types": supported,
            },
        )
        self.table = table
        self.column = column
        self.native_type = native_type


# === Consistency violations ===


class ConsistencyError(BureaucratError):
    """A single-row mutation invariant was violated."""

    pass


class UnexpectedAffectedRowCountError(ConsistencyError):
    """A mutation changed a number of rows other than one."""

    def __init__(self, entity_code: str, operation: str, count: int) -> None:
        super().__init__(
            f"Data {operation} on '{entity_code}' expected to change a single row "
            f"but it changed {count}.",
            {"entity_code": entity_code, "operation": operation, "count": count},
        )
        self.entity_code = entity_code
        self.operation = operation
        self.count = count


class UnexpectedReadCountError(ConsistencyError):
    """Reading back a just-updated entity returned a number of rows other than one."""

    def __init__(self, entity_code: str, count: int) -> None:
        super().__init__(
            f"Expected reading the '{entity_code}' entity just updated to return a single "
            f"entity but {count} were returned instead.",
            {"entity_code": entity_code, "count": count},
        )
        self.entity_code = entity_code
        self.count = count
