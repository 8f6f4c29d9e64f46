# data_mapping.py
from typing import Iterable, Optional, Tuple

from recordflow.engine.field_value import FieldValue, Record, ValueKind
from recordflow.errors import MissingFieldError

MappingPairs = Iterable[Tuple[str, str]]


#######################
# 1) dotted paths
#######################
def get_path(record: Record, path: str) -> Optional[FieldValue]:
    """
    Resolve "a.b.c" through nested OBJECT values.
    A top-level key spelled exactly like the path wins over traversal.
    Returns None when any segment is absent.
    """
    if path in record:
        return record[path]
    head, *rest = path.split(".")
    value = record.get(head)
    for key in rest:
        if value is None or value.kind != ValueKind.OBJECT:
            return None
        value = value.value.get(key)
    return value


def set_path(record: Record, path: str, value: FieldValue) -> None:
    """
    Write `value` at "a.b.c", creating intermediate OBJECT values.
    Intermediate objects are copied, so values shared with other records
    are never mutated. A non-object intermediate is replaced.
    """
    keys = path.split(".")
    if len(keys) == 1 or path in record:
        record[path] = value
        return

    target = record
    for key in keys[:-1]:
        current = target.get(key)
        children = dict(current.value) if current is not None and current.kind == ValueKind.OBJECT else {}
        target[key] = FieldValue(ValueKind.OBJECT, children)
        target = children
    target[keys[-1]] = value


#######################
# 2) apply_mapping
#######################
def apply_mapping(record: Record, mapping: MappingPairs) -> Record:
    """
    Rename/select fields per (source_field -> target_field) pairs.
    1) empty mapping => passthrough, every field copied as-is
    2) otherwise only the mapped targets appear in the result
    3) an absent source field raises MissingFieldError
    Both sides accept dotted paths into nested objects.
    """
    pairs = list(mapping)
    if not pairs:
        return dict(record)

    result: Record = {}
    for source, target in pairs:
        value = get_path(record, source)
        if value is None:
            raise MissingFieldError(source)
        set_path(result, target, value)
    return result


#######################
# 3) merge_records
#######################
def merge_records(previous: Record, current: Record) -> Record:
    """Field union of both records; `current` wins on collisions."""
    merged = dict(previous)
    merged.update(current)
    return merged
