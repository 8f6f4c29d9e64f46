import pytest

from recordflow.engine.data_mapping import apply_mapping, get_path, merge_records, set_path
from recordflow.engine.field_value import FieldValue, record_from_json, record_to_json
from recordflow.errors import MissingFieldError


def test_empty_mapping_is_passthrough():
    record = record_from_json({"a": 1, "b": "x", "c": None})
    result = apply_mapping(record, [])
    assert result == record
    assert result is not record


def test_mapping_renames_and_selects():
    record = record_from_json({"first": "Ada", "last": "Lovelace", "unused": 1})
    result = apply_mapping(record, [("first", "first_name"), ("last", "last_name")])
    assert record_to_json(result) == {"first_name": "Ada", "last_name": "Lovelace"}


def test_one_source_can_feed_several_targets():
    record = record_from_json({"total": 5})
    result = apply_mapping(record, [("total", "sum"), ("total", "amount")])
    assert record_to_json(result) == {"sum": 5.0, "amount": 5.0}


def test_missing_source_field():
    with pytest.raises(MissingFieldError) as exc:
        apply_mapping(record_from_json({"a": 1}), [("b", "c")])
    assert exc.value.field == "b"


def test_merge_current_wins():
    prev = record_from_json({"a": 1, "b": 2})
    cur = record_from_json({"b": 3, "c": 4})
    assert record_to_json(merge_records(prev, cur)) == {"a": 1.0, "b": 3.0, "c": 4.0}


def test_dotted_paths_read_and_build_nested_objects():
    record = record_from_json({"nested": {"source": "nested_value"}, "other": 1})
    result = apply_mapping(record, [("nested.source", "final.nested")])
    assert record_to_json(result) == {"final": {"nested": "nested_value"}}


def test_dotted_targets_share_one_object():
    record = record_from_json({"first": "Ada", "last": "Lovelace"})
    result = apply_mapping(record, [("first", "name.first"), ("last", "name.last")])
    assert record_to_json(result) == {"name": {"first": "Ada", "last": "Lovelace"}}


def test_literal_dotted_key_wins_over_traversal():
    record = record_from_json({"a.b": "flat", "a": {"b": "nested"}})
    assert get_path(record, "a.b") == FieldValue.string("flat")


def test_dotted_path_through_non_object_is_missing():
    record = record_from_json({"a": 5})
    assert get_path(record, "a.b") is None
    with pytest.raises(MissingFieldError) as exc:
        apply_mapping(record, [("a.b", "c")])
    assert exc.value.field == "a.b"


def test_set_path_does_not_mutate_shared_objects():
    source = record_from_json({"meta": {"id": 1}})
    target = dict(source)
    set_path(target, "meta.tag", FieldValue.string("x"))
    assert record_to_json(source) == {"meta": {"id": 1}}
    assert record_to_json(target) == {"meta": {"id": 1, "tag": "x"}}
