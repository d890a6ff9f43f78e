"""
Row validation: normalized CSV row -> CarRecord, or a reason it was rejected.

Rules:
- make_name, model_name, engine_type and body_type must be present and
  non-empty, otherwise nothing else is parsed.
- text fields are trimmed; optional ones become None when empty.
- integer/decimal fields become None when empty; any other unparsable value
  rejects the whole row.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Mapping

from cars.schemas import (
    DECIMAL_FIELDS,
    INTEGER_FIELDS,
    OPTIONAL_TEXT_FIELDS,
    REQUIRED_FIELDS,
    CarRecord,
)

MISSING_REQUIRED_MESSAGE = "Missing required fields: " + ", ".join(REQUIRED_FIELDS)

_INTEGER = re.compile(r"^[+-]?\d+$")
_DECIMAL = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


class FieldValueError(ValueError):
    def __init__(self, message: str, *, field: str, value: Any) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


@dataclass(frozen=True)
class RowValidation:
    valid: bool
    data: CarRecord | None = None
    error: str | None = None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _is_blank(value: Any) -> bool:
    return _text(value) == ""


def parse_integer(value: Any, field: str) -> int | None:
    if _is_blank(value):
        return None
    raw = _text(value)
    if _INTEGER.match(raw):
        return int(raw)
    # "4.0" is an integer written by a spreadsheet.
    if _DECIMAL.match(raw):
        number = float(raw)
        if math.isfinite(number) and number.is_integer():
            return int(number)
    raise FieldValueError(f"Invalid integer value for {field}: {value}", field=field, value=value)


def parse_decimal(value: Any, field: str) -> float | None:
    if _is_blank(value):
        return None
    raw = _text(value)
    number = float(raw) if _DECIMAL.match(raw) else math.nan
    if not math.isfinite(number):
        raise FieldValueError(f"Invalid numeric value for {field}: {value}", field=field, value=value)
    return number


def validate_row(row: Mapping[str, Any]) -> RowValidation:
    """
    Validate one normalized row. Never raises for bad data.
    """
    if any(_is_blank(row.get(field)) for field in REQUIRED_FIELDS):
        return RowValidation(valid=False, error=MISSING_REQUIRED_MESSAGE)

    values: dict[str, Any] = {field: _text(row.get(field)) for field in REQUIRED_FIELDS}
    for field in OPTIONAL_TEXT_FIELDS:
        values[field] = _text(row.get(field)) or None

    try:
        for field in INTEGER_FIELDS:
            values[field] = parse_integer(row.get(field), field)
        for field in DECIMAL_FIELDS:
            values[field] = parse_decimal(row.get(field), field)
    except FieldValueError as exc:
        return RowValidation(valid=False, error=str(exc))

    return RowValidation(valid=True, data=CarRecord(**values))
