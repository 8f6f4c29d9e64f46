"""
step_runner.py -- evaluate one step's Transform against its scope
Supports:
    none        (passthrough)
    calculate   (add / subtract / multiply / divide)
    concatenate (ordered parts + separator)
"""

from __future__ import annotations

import math
import operator
from typing import Callable, Dict

from recordflow.dsl.dsl_model import (
    ArithmeticOp,
    CalculateTransform,
    ConcatenateTransform,
    ConstOperand,
    FieldOperand,
    NoneTransform,
)
from recordflow.engine.coercion import coerce_to_number, coerce_to_string
from recordflow.engine.data_mapping import get_path, set_path
from recordflow.engine.field_value import FieldValue, Record
from recordflow.errors import (
    ConversionError,
    DivisionByZeroError,
    MissingFieldError,
    RowError,
    UnsupportedOperationError,
)

# ------------------------------------------------------------------ #
#                       arithmetic operators
# ------------------------------------------------------------------ #
ARITHMETIC_OPERATORS: Dict[ArithmeticOp, Callable[[float, float], float]] = {
    ArithmeticOp.ADD:      operator.add,
    ArithmeticOp.SUBTRACT: operator.sub,
    ArithmeticOp.MULTIPLY: operator.mul,
    ArithmeticOp.DIVIDE:   operator.truediv,
}


# ------------------------------------------------------------------ #
#                       operand resolution
# ------------------------------------------------------------------ #
def resolve_operand(operand, scope: Record) -> FieldValue:
    match operand:
        case FieldOperand(field=name):
            value = get_path(scope, name)
            if value is None:
                raise MissingFieldError(name)
            return value
        case ConstOperand(value=value):
            return FieldValue.from_json(value)
        case _:
            raise UnsupportedOperationError(f"Unsupported operand: {operand!r}")


def _operand_name(operand):
    # used to label conversion errors
    return operand.field if isinstance(operand, FieldOperand) else None


def _calculate(t: CalculateTransform, scope: Record, step_index: int) -> Record:
    left = coerce_to_number(resolve_operand(t.left, scope), _operand_name(t.left))
    right = coerce_to_number(resolve_operand(t.right, scope), _operand_name(t.right))

    if t.op == ArithmeticOp.DIVIDE and right == 0:
        raise DivisionByZeroError(step_index, t.target)

    value = ARITHMETIC_OPERATORS[t.op](left, right)
    if not math.isfinite(value):
        raise ConversionError(f"Step {step_index}: result for target field '{t.target}' is not a finite number")

    result = dict(scope)
    set_path(result, t.target, FieldValue.number(value))
    return result


def _concatenate(t: ConcatenateTransform, scope: Record) -> Record:
    pieces = [
        coerce_to_string(resolve_operand(part, scope), _operand_name(part))
        for part in t.parts
    ]
    result = dict(scope)
    set_path(result, t.target, FieldValue.string(t.separator.join(pieces)))
    return result


# ------------------------------------------------------------------ #
#                          entry point
# ------------------------------------------------------------------ #
def evaluate_transform(transform, scope: Record, step_index: int) -> Record:
    """Return a new record: scope plus the transform's target field."""
    try:
        match transform:
            case NoneTransform():
                return dict(scope)
            case CalculateTransform():
                return _calculate(transform, scope, step_index)
            case ConcatenateTransform():
                return _concatenate(transform, scope)
    except RowError as e:
        raise e.at_step(step_index)

    raise UnsupportedOperationError(f"Step {step_index}: unsupported transform {type(transform).__name__}")
