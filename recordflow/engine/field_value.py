# recordflow/engine/field_value.py

from enum import Enum
from typing import Any, Dict

from recordflow.errors import ConversionError


class ValueKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"


class FieldValue:
    """
    One dynamically typed record value:
      - kind: which variant the value holds
      - value: str / float / bool / None / dict[str, FieldValue] / list[FieldValue]
    Numbers are always stored as float.
    """
    __slots__ = ("kind", "value")

    def __init__(self, kind: ValueKind, value: Any = None):
        self.kind = kind
        self.value = value

    # ---------- constructors ----------
    @classmethod
    def string(cls, value: str) -> "FieldValue":
        return cls(ValueKind.STRING, value)

    @classmethod
    def number(cls, value: float) -> "FieldValue":
        try:
            return cls(ValueKind.NUMBER, float(value))
        except OverflowError as e:
            raise ConversionError("number is too large to represent as a float") from e

    @classmethod
    def boolean(cls, value: bool) -> "FieldValue":
        return cls(ValueKind.BOOL, bool(value))

    @classmethod
    def null(cls) -> "FieldValue":
        return cls(ValueKind.NULL, None)

    @classmethod
    def from_json(cls, obj: Any) -> "FieldValue":
        if isinstance(obj, FieldValue):
            return obj
        if obj is None:
            return cls.null()
        # bool is a subclass of int
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, (int, float)):
            return cls.number(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, dict):
            return cls(ValueKind.OBJECT, {str(k): cls.from_json(v) for k, v in obj.items()})
        if isinstance(obj, (list, tuple)):
            return cls(ValueKind.ARRAY, [cls.from_json(v) for v in obj])
        raise ConversionError(f"unsupported value type: {type(obj).__name__}")

    def to_json(self) -> Any:
        if self.kind == ValueKind.OBJECT:
            return {k: v.to_json() for k, v in self.value.items()}
        if self.kind == ValueKind.ARRAY:
            return [v.to_json() for v in self.value]
        return self.value

    def __eq__(self, other):
        if not isinstance(other, FieldValue):
            return NotImplemented
        return self.kind == other.kind and self.value == other.value

    def __hash__(self):
        return hash((self.kind, repr(self.value)))

    def __repr__(self):
        return f"FieldValue(kind={self.kind.value}, value={self.value!r})"


Record = Dict[str, FieldValue]


def record_from_json(data: Dict[str, Any]) -> Record:
    if not isinstance(data, dict):
        raise ConversionError(f"record must be a JSON object, got {type(data).__name__}")
    return {str(k): FieldValue.from_json(v) for k, v in data.items()}


def record_to_json(record: Record) -> Dict[str, Any]:
    return {k: v.to_json() for k, v in record.items()}
