import pytest

from recordflow.engine.field_value import FieldValue, ValueKind, record_from_json, record_to_json
from recordflow.errors import ConversionError


def test_bool_is_not_number():
    assert FieldValue.from_json(True).kind == ValueKind.BOOL
    assert FieldValue.from_json(1).kind == ValueKind.NUMBER


def test_integers_become_floats():
    v = FieldValue.from_json(3)
    assert isinstance(v.value, float)
    assert v.to_json() == 3.0


def test_nested_values():
    data = {"tags": ["a", None, 2], "meta": {"ok": False}}
    record = record_from_json(data)
    assert record["tags"].kind == ValueKind.ARRAY
    assert record["meta"].value["ok"] == FieldValue.boolean(False)
    assert record_to_json(record) == {"tags": ["a", None, 2.0], "meta": {"ok": False}}


def test_equality_is_by_kind_and_value():
    assert FieldValue.string("1") != FieldValue.number(1)
    assert FieldValue.null() == FieldValue.from_json(None)


def test_integer_too_large_for_float():
    with pytest.raises(ConversionError) as exc:
        FieldValue.from_json(10**400)
    assert "too large" in exc.value.message


def test_unsupported_value_type():
    with pytest.raises(ConversionError) as exc:
        FieldValue.from_json({1, 2})
    assert exc.value.message == "unsupported value type: set"


def test_record_must_be_an_object():
    with pytest.raises(ConversionError) as exc:
        record_from_json([1, 2])
    assert exc.value.message == "record must be a JSON object, got list"
