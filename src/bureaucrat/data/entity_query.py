"""Metadata-driven CRUD for a single entity type.

Statements are built from the entity's ``table`` and each field's ``column``,
never from caller-supplied keys: data keys are only matched against field
codes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from bureaucrat.data.codec import decode_row, decode_value, encode_value
from bureaucrat.exceptions import (
    MissingIdentifierFieldError,
    MissingIdentifierValueError,
    MissingMandatoryFieldError,
    NoIdentifierFieldsError,
    UnexpectedAffectedRowCountError,
    UnexpectedReadCountError,
    UnknownFieldsError,
)
from bureaucrat.sql.builder import Delete, Insert, Select, Update

if TYPE_CHECKING:
    from bureaucrat.core.types import EntityMeta, FieldMeta
    from bureaucrat.store.base import RelationalStore

logger = logging.getLogger(__name__)


class EntityQuery:
    """CRUD operations on one entity type of the domain store."""

    def __init__(self, store: RelationalStore, entity_type: EntityMeta) -> None:
        """Initialize the query helper.

        Args:
            store: Domain store holding the entity rows
            entity_type: Metadata of the entity type
        """
        self._store = store
        self._et = entity_type

    @property
    def entity_type(self) -> EntityMeta:
        return self._et

    def _identifiers(self) -> list[FieldMeta]:
        identifiers = self._et.identifier_fields
        if not identifiers:
            raise NoIdentifierFieldsError(self._et.code)
        return identifiers

    def _identifier_values(self, data: Mapping[str, Any]) -> list[tuple[FieldMeta, Any]]:
        """Identifier fields with their (non-None) values from data."""
        pairs = []
        for field in self._identifiers():
            value = data.get(field.code)
            if value is None:
                raise MissingIdentifierValueError(self._et.code, field.code)
            pairs.append((field, encode_value(field, value)))
        return pairs

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Insert one entity.

        Args:
            data: Field values keyed by field code. Absent keys are left to
                the store's column defaults.

        Returns:
            The input data decoded like ``read()`` results, plus the generated
            identifier when the store reports one

        Raises:
            UnknownFieldsError: If data has keys matching no field code
            MissingMandatoryFieldError: If a mandatory field has no value
        """
        codes = set(self._et.field_codes)
        unknown = [key for key in data if key not in codes]
        if unknown:
            raise UnknownFieldsError(self._et.code, unknown, self._et.field_codes)

        insert = Insert().into(self._et.table)
        for field in self._et.fields:
            value = data.get(field.code)
            if field.mandatory and not field.generated and value is None:
                raise MissingMandatoryFieldError(self._et.code, field.code)
            if field.code in data:
                insert = insert.set(field.column, encode_value(field, value))

        result = insert.execute(self._store)

        # Returned values are decoded the way read() decodes them
        by_code = {f.code: f for f in self._et.fields}
        decoded = {k: decode_value(by_code[k], v) for k, v in data.items()}

        generated = self._et.generated_field
        if generated is not None and result.last_inserted_id is not None:
            created = {generated.code: result.last_inserted_id}
            created.update((k, v) for k, v in decoded.items() if k != generated.code)
            logger.debug(f"Created '{self._et.code}' {generated.code}={result.last_inserted_id}")
            return created
        return decoded

    def read(
        self, ids: Mapping[str, Any] | None = None, limit: int | None = None
    ) -> list[dict[str, Any]]:
        """Read entities.

        Args:
            ids: Identifier values of a single entity, keyed by field code.
                Non-identifier keys are ignored.
            limit: Maximum number of entities to return

        Returns:
            Entity data keyed by field code, every field included

        Raises:
            MissingIdentifierFieldError: If ids lacks one of the identifier fields
        """
        select = Select().from_(self._et.table)
        if ids is not None:
            for field in self._identifiers():
                if field.code not in ids:
                    raise MissingIdentifierFieldError(self._et.code, field.code)
                select = select.where(field.column, encode_value(field, ids[field.code]))
        if limit is not None:
            select = select.limit(limit)

        return [decode_row(self._et.fields, row) for row in select.query(self._store)]

    def update(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Update a single entity addressed by its identifier values.

        Keys absent from data are left unchanged; a ``None`` value sets NULL.

        Returns:
            The entity as stored after the update

        Raises:
            MissingIdentifierValueError: If an identifier value is absent or None
            UnexpectedAffectedRowCountError: If the update changed other than one row
            UnexpectedReadCountError: If reading the entity back didn't yield one row
        """
        update = Update().table(self._et.table)
        for field in self._et.fields:
            if not field.identifier and field.code in data:
                update = update.set(field.column, encode_value(field, data[field.code]))
        for field, value in self._identifier_values(data):
            update = update.where(field.column, value)

        result = update.execute(self._store)
        if result.affected_row_count != 1:
            raise UnexpectedAffectedRowCountError(
                self._et.code, "update", result.affected_row_count
            )

        entities = self.read(ids=data)
        if len(entities) != 1:
            raise UnexpectedReadCountError(self._et.code, len(entities))
        return entities[0]

    def delete(self, ids: Mapping[str, Any]) -> None:
        """Delete a single entity addressed by its identifier values.

        Raises:
            MissingIdentifierValueError: If an identifier value is absent or None
            UnexpectedAffectedRowCountError: If the delete removed other than one row
        """
        delete = Delete().table(self._et.table)
        for field, value in self._identifier_values(ids):
            delete = delete.where(field.column, value)

        result = delete.execute(self._store)
        if result.affected_row_count != 1:
            raise UnexpectedAffectedRowCountError(
                self._et.code, "delete", result.affected_row_count
            )
