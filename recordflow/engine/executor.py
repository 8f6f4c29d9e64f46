"""Step chain executor: runs one input record through every step of a workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from recordflow.dsl.dsl_model import (
    WorkflowDSL,
    FormatFrom,
    EntityFrom,
    PreviousStepFrom,
)
from recordflow.engine.context import AccumulatedContext
from recordflow.engine.data_mapping import apply_mapping, merge_records
from recordflow.engine.field_value import Record, record_from_json, record_to_json
from recordflow.engine.step_runner import evaluate_transform
from recordflow.errors import RowError, UnsupportedOperationError, ValidationError

# lookup(step_index, from_def, payload) -> raw record for a Format/Entity step after step 0
SourceLookup = Callable[[int, Any, Dict[str, Any]], Dict[str, Any]]


@dataclass
class ChainResult:
    record: Record
    sink: Any
    step_outputs: List[Record] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return record_to_json(self.record)


def _read_source(idx: int, from_def, payload: Record, raw_payload, context: AccumulatedContext,
                 lookup: Optional[SourceLookup]) -> Record:
    match from_def:
        case PreviousStepFrom():
            return context.snapshot()
        case FormatFrom() | EntityFrom():
            if idx == 0 or lookup is None:
                return payload
            return record_from_json(lookup(idx, from_def, raw_payload))
        case _:
            raise UnsupportedOperationError(f"Step {idx}: unsupported source {type(from_def).__name__}")


def execute_chain(dsl: WorkflowDSL, payload: Dict[str, Any], lookup: Optional[SourceLookup] = None) -> ChainResult:
    """
    For step i:
      1) raw        = payload (Format/Entity) | accumulated context (PreviousStep)
      2) normalized = from.mapping(raw)
      3) scope      = context + normalized
      4) transformed = transform(scope)
      5) output     = to.mapping(transformed)
      6) context    = context + output
    The final context goes to the last step's sink.
    """
    if not dsl.steps:
        raise ValidationError(["Workflow must contain at least one step"])

    try:
        record = record_from_json(payload)
    except RowError as e:
        raise e.at_step(0)
    context = AccumulatedContext()

    for idx, step in enumerate(dsl.steps):
        try:
            raw = _read_source(idx, step.from_, record, payload, context, lookup)
            normalized = apply_mapping(raw, step.from_.mapping_pairs())
            scope = merge_records(context.fields, normalized)
            transformed = evaluate_transform(step.transform, scope, idx)
            output = apply_mapping(transformed, step.to.mapping_pairs())
        except RowError as e:
            raise e.at_step(idx)
        context.fold(output)

    return ChainResult(record=context.snapshot(), sink=dsl.steps[-1].to, step_outputs=context.step_outputs)
