"""Domain store introspection.

Infers entity metadata from a table's physical schema and one sample row.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from bureaucrat.core.types import EntityMeta, FieldMeta, FieldType, TitleFormat
from bureaucrat.exceptions import UnsupportedColumnTypeError
from bureaucrat.sql.builder import Select

if TYPE_CHECKING:
    from bureaucrat.store.base import RelationalStore

logger = logging.getLogger(__name__)

# Base native type name -> semantic type. Anything else is rejected.
NATIVE_TYPES: dict[str, FieldType] = {
    # integer-like
    "INTEGER": FieldType.NUMBER,
    "INT": FieldType.NUMBER,
    "BIGINT": FieldType.NUMBER,
    "SMALLINT": FieldType.NUMBER,
    "TINYINT": FieldType.NUMBER,
    "MEDIUMINT": FieldType.NUMBER,
    "SERIAL": FieldType.NUMBER,
    "BIGSERIAL": FieldType.NUMBER,
    # real-like
    "REAL": FieldType.NUMBER,
    "FLOAT": FieldType.NUMBER,
    "DOUBLE": FieldType.NUMBER,
    "NUMERIC": FieldType.NUMBER,
    "DECIMAL": FieldType.NUMBER,
    # text-like
    "TEXT": FieldType.STRING,
    "VARCHAR": FieldType.STRING,
    "CHAR": FieldType.STRING,
    "CHARACTER": FieldType.STRING,
    "NVARCHAR": FieldType.STRING,
    "NCHAR": FieldType.STRING,
    "CLOB": FieldType.STRING,
    "STRING": FieldType.STRING,
    # temporal
    "DATE": FieldType.DATE,
    "DATETIME": FieldType.DATETIME,
    "TIMESTAMP": FieldType.DATETIME,
    "TIME": FieldType.TIME,
}

_BASE_TYPE = re.compile(r"^\s*([A-Za-z]+)")


def to_capitalized_spaced(s: str) -> str:
    """Convert a snake_case name into "Capitalized Spaced".

    Ex: ``first_name`` -> ``First Name``
    """
    s = s.strip()
    if not s:
        return s
    s = s[0].upper() + s[1:]
    return re.sub(r"_(\w)", lambda m: " " + m.group(1).upper(), s)


def native_type_to_field_type(table: str, column: str, native_type: str) -> FieldType:
    """Map a native column type to its semantic field type.

    Only the base type name counts: ``VARCHAR(255)`` maps like ``VARCHAR`` and
    ``TIMESTAMP WITH TIME ZONE`` like ``TIMESTAMP``.

    Raises:
        UnsupportedColumnTypeError: If the type has no semantic mapping
    """
    match = _BASE_TYPE.match(native_type or "")
    field_type = NATIVE_TYPES.get(match.group(1).upper()) if match else None
    if field_type is None:
        raise UnsupportedColumnTypeError(table, column, native_type, sorted(NATIVE_TYPES))
    return field_type


def title_format_for(fields: list[FieldMeta]) -> TitleFormat:
    """Title from the first two visible fields, subtitle from the first three."""
    visible = [f for f in fields if not f.hidden]

    def first(n: int) -> str:
        return " ".join(f"#{{{f.code}}}" for f in visible[:n])

    return TitleFormat(title=first(2), subtitle=first(3))


def _placeholder(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


class Introspector:
    """Builds EntityMeta for tables not yet covered by the metadata store."""

    def __init__(self, store: RelationalStore) -> None:
        """Initialize the introspector.

        Args:
            store: Domain store to inspect
        """
        self._store = store

    def inspect_table(self, table: str) -> EntityMeta:
        """Infer unsaved metadata for one table.

        Raises:
            UnsupportedColumnTypeError: If any column has an unmapped type
        """
        logger.info(f"Introspecting table '{table}'")
        samples = Select().from_(table).limit(1).query(self._store)
        sample = samples[0] if samples else {}

        columns = self._store.describe_columns(table)
        fields = []
        for column in columns:
            is_id = column.is_primary_key
            fields.append(
                FieldMeta(
                    code=column.name,
                    column=column.name,
                    name=to_capitalized_spaced(column.name),
                    placeholder=None if is_id else _placeholder(sample.get(column.name)),
                    type=native_type_to_field_type(table, column.name, column.native_type),
                    identifier=is_id,
                    hidden=is_id,
                    mandatory=column.is_not_null,
                )
            )

        # A single numeric primary key is assumed to auto-increment
        identifiers = [f for f in fields if f.identifier]
        if len(identifiers) == 1 and identifiers[0].type == FieldType.NUMBER:
            fields = [f.model_copy(update={"generated": f.identifier}) for f in fields]

        return EntityMeta(
            code=table,
            name=to_capitalized_spaced(table),
            table=table,
            title_format=title_format_for(fields),
            fields=fields,
        )
