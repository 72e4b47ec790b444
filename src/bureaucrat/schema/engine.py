"""Metadata store for entity and field definitions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from bureaucrat.core.types import EntityMeta
from bureaucrat.exceptions import EntityTypeNotFoundError, SchemaChangeError
from bureaucrat.schema.models import Base, EntityTypeRecord, FieldTypeRecord

if TYPE_CHECKING:
    from bureaucrat.core.connection import DatabaseConnection

logger = logging.getLogger(__name__)


class MetadataStore:
    """Persists EntityMeta/FieldMeta in the metadata database.

    The data domain only ever reads and appends here. Renames are user
    overrides: they change the external ``code`` and leave the physical
    ``table``/``column`` untouched.
    """

    def __init__(self, connection: DatabaseConnection) -> None:
        """Initialize the metadata store.

        Args:
            connection: Connection to the metadata database
        """
        self._connection = connection
        self._initialized = False

    @property
    def table_names(self) -> list[str]:
        """Names of the tables this store owns."""
        return list(Base.metadata.tables)

    def initialize(self) -> None:
        """Create metadata tables if they don't exist."""
        if self._initialized:
            return
        existing = set(inspect(self._connection.engine).get_table_names())
        Base.metadata.create_all(self._connection.engine)
        for name in self.table_names:
            if name not in existing:
                logger.info(f"Metadata table created: {name}")
        self._initialized = True

    def _get_session(self) -> Session:
        """Get a new database session."""
        return self._connection.get_session()

    def load_entity_types(self) -> list[EntityMeta]:
        """Read every entity type with its fields, both in persistence order."""
        self.initialize()
        with self._get_session() as session:
            records = session.scalars(
                select(EntityTypeRecord)
                .options(selectinload(EntityTypeRecord.fields))
                .order_by(EntityTypeRecord.id)
            ).all()
            return [record.to_meta() for record in records]

    def save_entity_type(self, entity_type: EntityMeta) -> EntityMeta:
        """Persist a freshly inferred entity type and its fields.

        Args:
            entity_type: Unsaved entity metadata

        Returns:
            Copy of the metadata carrying the assigned ids

        Raises:
            SchemaChangeError: If the code or table is already taken
        """
        self.initialize()
        with self._get_session() as session:
            record = EntityTypeRecord(
                code=entity_type.code,
                name=entity_type.name,
                table_name=entity_type.table,
                title_format_title=entity_type.title_format.title,
                title_format_subtitle=entity_type.title_format.subtitle,
            )
            # Appending in order keeps field ids in declaration order
            for field in entity_type.fields:
                record.fields.append(FieldTypeRecord.from_meta(field))
            session.add(record)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise SchemaChangeError(
                    f"Cannot save entity type '{entity_type.code}' for table "
                    f"'{entity_type.table}': {e.orig}",
                    {"code": entity_type.code, "table": entity_type.table},
                ) from e

            session.refresh(record)
            saved = record.to_meta()
            logger.debug(f"Saved entity type '{saved.code}' (id={saved.id})")
            return saved

    def _get_record(self, session: Session, code: str) -> EntityTypeRecord:
        record = session.scalars(
            select(EntityTypeRecord).where(EntityTypeRecord.code == code)
        ).first()
        if record is None:
            available = list(
                session.scalars(select(EntityTypeRecord.code).order_by(EntityTypeRecord.id))
            )
            raise EntityTypeNotFoundError(code, available)
        return record

    def rename_entity_type(self, code: str, new_code: str) -> EntityMeta:
        """Change the external code of an entity type.

        Raises:
            EntityTypeNotFoundError: If no entity type has the given code
            SchemaChangeError: If the new code is already taken
        """
        self.initialize()
        with self._get_session() as session:
            record = self._get_record(session, code)
            record.code = new_code
            self._commit(session, f"Cannot rename entity type '{code}' to '{new_code}'")
            session.refresh(record)
            logger.info(f"Entity type '{code}' renamed to '{new_code}'")
            return record.to_meta()

    def rename_field(self, entity_code: str, field_code: str, new_code: str) -> EntityMeta:
        """Change the external code of a field, keeping its column.

        Raises:
            EntityTypeNotFoundError: If no entity type has the given code
            SchemaChangeError: If the field doesn't exist or the new code is taken
        """
        self.initialize()
        with self._get_session() as session:
            record = self._get_record(session, entity_code)
            field = next((f for f in record.fields if f.code == field_code), None)
            if field is None:
                available = [f.code for f in record.fields]
                raise SchemaChangeError(
                    f"Field '{field_code}' not found on '{entity_code}'. "
                    f"Available fields: {', '.join(available)}",
                    {"entity_code": entity_code, "available_fields": available},
                )
            field.code = new_code
            self._commit(
                session, f"Cannot rename field '{entity_code}.{field_code}' to '{new_code}'"
            )
            session.refresh(record)
            logger.info(f"Field '{entity_code}.{field_code}' renamed to '{new_code}'")
            return record.to_meta()

    def _commit(self, session: Session, message: str) -> None:
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise SchemaChangeError(f"{message}: {e.orig}") from e
