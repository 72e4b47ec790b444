"""Core types for the Bureaucrat data domain.

Entity and field metadata are plain pydantic models. They are frozen once
built: persisting a freshly introspected entity produces a copy carrying the
identities assigned by the metadata store.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FieldType(StrEnum):
    """Semantic field types inferred from native column types."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid field type values."""
        return [t.value for t in cls]


class TitleFormat(BaseModel):
    """Display templates referencing field codes as ``#{code}``."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    subtitle: str = ""


class FieldMeta(BaseModel):
    """Mapping between one physical column and its external field."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(default=0, description="Metadata store identity (0 before persistence)")
    code: str = Field(..., description="External field key, unique within the entity")
    column: str = Field(..., description="Physical column name in the domain store")
    name: str = Field(..., description="Human-readable label")
    placeholder: str | None = Field(default=None, description="Example value for UI hints")
    type: FieldType = Field(default=FieldType.STRING, description="Semantic type")
    identifier: bool = Field(default=False, description="Part of the primary key")
    hidden: bool = Field(default=False, description="Not surfaced to end users by default")
    mandatory: bool = Field(default=False, description="Column is declared NOT NULL")
    generated: bool = Field(default=False, description="Value produced by the store on insert")


class EntityMeta(BaseModel):
    """Describes one manageable entity, normally backed by one table."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(default=0, description="Metadata store identity (0 before persistence)")
    code: str = Field(..., description="External entity key")
    name: str = Field(..., description="Human-readable label")
    table: str = Field(..., description="Physical table name in the domain store")
    title_format: TitleFormat = Field(default_factory=TitleFormat)
    fields: list[FieldMeta] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_unique_field_codes(self) -> EntityMeta:
        seen: set[str] = set()
        for field in self.fields:
            if field.code in seen:
                raise ValueError(f"Duplicate field code '{field.code}' in entity '{self.code}'")
            seen.add(field.code)
        return self

    @property
    def field_codes(self) -> list[str]:
        """Field codes in declaration order."""
        return [f.code for f in self.fields]

    @property
    def identifier_fields(self) -> list[FieldMeta]:
        """Fields that together address a single row."""
        return [f for f in self.fields if f.identifier]

    @property
    def generated_field(self) -> FieldMeta | None:
        """The store-generated field, if any."""
        return next((f for f in self.fields if f.generated), None)

    def field(self, code: str) -> FieldMeta | None:
        """Get a field by code."""
        return next((f for f in self.fields if f.code == code), None)


class CachePolicy(BaseModel):
    """Tuning for the entity type cache and table discovery."""

    # None keeps loaded entity types until invalidate() is called
    ttl_seconds: float | None = Field(default=None, ge=0)
    excluded_tables: list[str] = Field(
        default_factory=list, description="Domain tables never introspected"
    )
