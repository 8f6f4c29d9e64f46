"""
coercion.py -- implicit conversions used by the transform evaluator

    coerce_to_number : String / Number  ->  float
    coerce_to_string : String / Number / Bool  ->  str

Everything else is rejected with ConversionError, naming the field
when one is known.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Optional

from recordflow.engine.field_value import FieldValue, ValueKind
from recordflow.errors import ConversionError

# signed decimal, optional fraction, optional exponent. ASCII digits only.
_NUMERIC_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)


def _prefix(field: Optional[str]) -> str:
    return f"Field '{field}': " if field is not None else ""


def _null_error(field: Optional[str], expected: str) -> ConversionError:
    if field is not None:
        return ConversionError(f"Field '{field}' is null, expected a {expected}")
    return ConversionError(f"value is null, expected a {expected}")


def parse_number(text: str) -> Optional[float]:
    """Parse a numeric literal, or return None when the text is not one."""
    stripped = text.strip()
    if not _NUMERIC_RE.match(stripped):
        return None
    number = float(stripped)
    if not math.isfinite(number):
        return None
    return number


def coerce_to_number(value: FieldValue, field: Optional[str] = None) -> float:
    match value.kind:
        case ValueKind.NUMBER:
            return value.value
        case ValueKind.STRING:
            number = parse_number(value.value)
            if number is None:
                raise ConversionError(
                    f"{_prefix(field)}cannot convert string '{value.value}' to number"
                )
            return number
        case ValueKind.NULL:
            raise _null_error(field, "number")
        case _:
            raise ConversionError(f"{_prefix(field)}cannot convert {value.kind.value} to number")


def format_number(number: float) -> str:
    """
    Render a float without exponent:
        100.0  -> "100"
        100.50 -> "100.5"
        1e308  -> "1000...0"
    """
    if not math.isfinite(number):
        raise ConversionError(f"cannot format non-finite number {number}")
    if number == 0:
        return "0"
    # repr() gives the shortest round-trip digits
    text = format(Decimal(repr(number)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def coerce_to_string(value: FieldValue, field: Optional[str] = None) -> str:
    match value.kind:
        case ValueKind.STRING:
            return value.value
        case ValueKind.NUMBER:
            try:
                return format_number(value.value)
            except ConversionError as e:
                raise ConversionError(f"{_prefix(field)}{e.message}") from e
        case ValueKind.BOOL:
            return "true" if value.value else "false"
        case ValueKind.NULL:
            raise _null_error(field, "string")
        case _:
            raise ConversionError(f"{_prefix(field)}cannot convert {value.kind.value} to string")
