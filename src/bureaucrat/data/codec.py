"""Value encoding and decoding driven by semantic field types.

Drivers hand back whatever the column affinity produced: SQLite returns text
for dates, PostgreSQL returns ``date`` objects, numeric columns may come back
as ``Decimal``. Decoding normalizes these into one Python type per FieldType;
encoding turns temporal values back into ISO text for storage.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from bureaucrat.core.types import FieldMeta, FieldType
from bureaucrat.exceptions import ValueDecodeError

logger = logging.getLogger(__name__)


def _decode_number(value: Any) -> int | float:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int | float):
        return value
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return float(value)
    raise TypeError(f"not a number: {type(value).__name__}")


def _decode_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _decode_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value))


def _decode_time(value: Any) -> time:
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value))


def _decode_string(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode()
    if isinstance(value, date | time):
        return value.isoformat()
    return str(value)


DECODERS = {
    FieldType.STRING: _decode_string,
    FieldType.NUMBER: _decode_number,
    FieldType.DATE: _decode_date,
    FieldType.DATETIME: _decode_datetime,
    FieldType.TIME: _decode_time,
}


def decode_value(field: FieldMeta, value: Any, strict: bool = False) -> Any:
    """Decode a raw store value for a field. ``None`` stays ``None``.

    A value that doesn't fit the field's type (text stored in an INTEGER
    column under SQLite affinity, a non-ISO date) is returned as stored,
    unless ``strict`` is set.

    Raises:
        ValueDecodeError: If ``strict`` and the value doesn't fit the field's type
    """
    if value is None:
        return None
    try:
        return DECODERS[FieldType(field.type)](value)
    except (TypeError, ValueError) as e:
        if strict:
            raise ValueDecodeError(field.code, str(field.type), value) from e
        logger.debug(f"Keeping raw value {value!r} of field '{field.code}': {e}")
        return value


def encode_value(field: FieldMeta, value: Any) -> Any:
    """Encode a caller value for storage in a field's column."""
    if isinstance(value, date | time):
        return value.isoformat()
    return value


def decode_row(
    fields: list[FieldMeta], row: dict[str, Any], strict: bool = False
) -> dict[str, Any]:
    """Map a raw row keyed by column into entity data keyed by field code.

    Every field appears in the result, in declaration order.
    """
    return {f.code: decode_value(f, row.get(f.column), strict) for f in fields}
