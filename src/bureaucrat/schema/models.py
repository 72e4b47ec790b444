"""SQLAlchemy ORM models for the Bureaucrat metadata store.

Entity and field metadata inferred from the domain store is kept here, so the
costly introspection runs once per table and users can override codes and
labels afterwards.
"""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from bureaucrat.core.types import EntityMeta, FieldMeta, FieldType, TitleFormat


class Base(DeclarativeBase):
    """Base class for all Bureaucrat metadata models."""

    pass


class EntityTypeRecord(Base):
    """One row per entity type (normally one per domain table)."""

    __tablename__ = "bcr_entity_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    table_name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    title_format_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    title_format_subtitle: Mapped[str | None] = mapped_column(Text, nullable=True)

    fields: Mapped[list[FieldTypeRecord]] = relationship(
        "FieldTypeRecord",
        back_populates="entity_type",
        cascade="all, delete-orphan",
        order_by="FieldTypeRecord.id",
    )

    def to_meta(self) -> EntityMeta:
        """Convert to the entity metadata model."""
        return EntityMeta(
            id=self.id,
            code=self.code,
            name=self.name,
            table=self.table_name,
            title_format=TitleFormat(
                title=self.title_format_title or "",
                subtitle=self.title_format_subtitle or "",
            ),
            fields=[f.to_meta() for f in self.fields],
        )


class FieldTypeRecord(Base):
    """One row per field of an entity type."""

    __tablename__ = "bcr_field_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("bcr_entity_types.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(255), nullable=False)
    column_name: Mapped[str] = mapped_column(String(255), nullable=False)
    placeholder: Mapped[str | None] = mapped_column(Text, nullable=True)
    field_type: Mapped[str] = mapped_column(String(20), nullable=False)
    is_identifier: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_hidden: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_mandatory: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_generated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    entity_type: Mapped[EntityTypeRecord] = relationship(
        "EntityTypeRecord", back_populates="fields"
    )

    # Field codes are unique within an entity type
    __table_args__ = (
        Index("ix_bcr_field_entity_code", "entity_type_id", "code", unique=True),
    )

    @classmethod
    def from_meta(cls, field: FieldMeta) -> FieldTypeRecord:
        """Build an unsaved record from field metadata."""
        return cls(
            name=field.name,
            code=field.code,
            column_name=field.column,
            placeholder=field.placeholder,
            field_type=str(field.type),
            is_identifier=field.identifier,
            is_hidden=field.hidden,
            is_mandatory=field.mandatory,
            is_generated=field.generated,
        )

    def to_meta(self) -> FieldMeta:
        """Convert to the field metadata model."""
        return FieldMeta(
            id=self.id,
            code=self.code,
            column=self.column_name,
            name=self.name,
            placeholder=self.placeholder,
            type=FieldType(self.field_type),
            identifier=self.is_identifier,
            hidden=self.is_hidden,
            mandatory=self.is_mandatory,
            generated=self.is_generated,
        )
