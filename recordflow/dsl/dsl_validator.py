import re
from typing import Any, Dict, List, Optional, Set

from recordflow.dsl.dsl_model import (
    WorkflowDSL,
    StepDefinition,
    FormatFrom,
    EntityFrom,
    PreviousStepFrom,
    CalculateTransform,
    ConcatenateTransform,
    FieldOperand,
    FormatTo,
    EntityTo,
    NextStepTo,
    PushOutput,
    FormatConfig,
    EntityFilter,
    ApiKeyAuth,
    BasicAuth,
    PreSharedKeyAuth,
)
from recordflow.errors import ValidationError

SAFE_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")
FILTER_OPERATORS = {"=", ">", "<", "<=", ">=", "IN", "NOT IN"}


def _is_safe(name: str) -> bool:
    return bool(SAFE_IDENTIFIER.match(name or ""))


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _check_uri(uri: Any, where: str, prefix: str) -> List[str]:
    if not isinstance(uri, str):
        return [f"{prefix}{where} is required"]
    if not uri.strip():
        return [f"{prefix}{where} must not be empty"]
    if not uri.startswith(("http://", "https://")):
        return [f"{prefix}{where} must start with http:// or https://"]
    return []


def validate_mapping(mapping: Dict[str, str], where: str, prefix: str) -> List[str]:
    errors = []
    for key, value in mapping.items():
        if not _is_safe(key):
            errors.append(f"{prefix}{where}.mapping key '{key}' is not a safe field name")
        if not _is_safe(value):
            errors.append(f"{prefix}{where}.mapping value '{value}' is not a safe field name")
    return errors


def validate_format(fmt: FormatConfig, where: str, prefix: str) -> List[str]:
    errors = []
    if _blank(fmt.format_type):
        errors.append(f"{prefix}{where}.format_type must not be empty")
    if fmt.format_type == "csv":
        delimiter = fmt.options.get("delimiter")
        if isinstance(delimiter, str) and len(delimiter) != 1:
            errors.append(f"{prefix}{where}.options.delimiter must be a single character")
        for opt in ("escape", "quote"):
            val = fmt.options.get(opt)
            if isinstance(val, str) and len(val) > 1:
                errors.append(f"{prefix}{where}.options.{opt} must be a single character when set")
    return errors


def validate_auth(auth, where: str, prefix: str) -> List[str]:
    errors = []
    if isinstance(auth, ApiKeyAuth):
        if _blank(auth.key):
            errors.append(f"{prefix}{where}.auth.api_key.key must not be empty")
        if _blank(auth.header_name):
            errors.append(f"{prefix}{where}.auth.api_key.header_name must not be empty")
    elif isinstance(auth, BasicAuth):
        if _blank(auth.username):
            errors.append(f"{prefix}{where}.auth.basic_auth.username must not be empty")
        if _blank(auth.password):
            errors.append(f"{prefix}{where}.auth.basic_auth.password must not be empty")
    elif isinstance(auth, PreSharedKeyAuth):
        if _blank(auth.key):
            errors.append(f"{prefix}{where}.auth.pre_shared_key.key must not be empty")
        if _blank(auth.field_name):
            errors.append(f"{prefix}{where}.auth.pre_shared_key.field_name must not be empty")
    return errors


def validate_filter(flt: EntityFilter, where: str, prefix: str) -> List[str]:
    if _blank(flt.field) or _blank(flt.operator) or flt.value is None:
        return [f"{prefix}{where} requires field, operator and value"]
    errors = []
    if not _is_safe(flt.field):
        errors.append(f"{prefix}{where}.field '{flt.field}' is not a safe field name")
    if flt.operator.strip().upper() not in FILTER_OPERATORS:
        errors.append(
            f"{prefix}{where}.operator '{flt.operator}' must be one of: " + ", ".join(sorted(FILTER_OPERATORS))
        )
    return errors


def validate_from(step: StepDefinition, idx: int, prefix: str) -> List[str]:
    src = step.from_
    errors = validate_mapping(src.mapping, "from", prefix)

    if isinstance(src, PreviousStepFrom):
        if idx == 0:
            errors.append("Step 0 cannot use PreviousStep source")
    elif isinstance(src, FormatFrom):
        if _blank(src.source.source_type):
            errors.append(f"{prefix}from.source.source_type must not be empty")
        elif src.source.source_type == "uri":
            errors += _check_uri(src.source.config.get("uri"), "from.source.config.uri", prefix)
        elif src.source.source_type == "api" and "endpoint" in src.source.config:
            errors.append(f"{prefix}from.source.config.endpoint is not allowed for api sources")
        errors += validate_format(src.format, "from.format", prefix)
        if src.source.auth is not None:
            errors += validate_auth(src.source.auth, "from.source", prefix)
    elif isinstance(src, EntityFrom):
        if _blank(src.entity_definition):
            errors.append(f"{prefix}from.entity.entity_definition must not be empty")
        if src.filter is not None:
            errors += validate_filter(src.filter, "from.entity.filter", prefix)
    return errors


def validate_transform(step: StepDefinition, prefix: str) -> List[str]:
    t = step.transform
    errors = []
    if isinstance(t, (CalculateTransform, ConcatenateTransform)):
        if not _is_safe(t.target):
            errors.append(f"{prefix}transform.target '{t.target}' is not a safe field name")
        operands = [t.left, t.right] if isinstance(t, CalculateTransform) else t.parts
        if isinstance(t, ConcatenateTransform) and not operands:
            errors.append(f"{prefix}transform.concatenate requires at least one part")
        for op in operands:
            if isinstance(op, FieldOperand) and not _is_safe(op.field):
                errors.append(f"{prefix}transform operand field '{op.field}' is not a safe field name")
    return errors


def validate_to(step: StepDefinition, idx: int, last: int, prefix: str) -> List[str]:
    dst = step.to
    errors = validate_mapping(dst.mapping, "to", prefix)

    if isinstance(dst, NextStepTo):
        if idx == last:
            errors.append(f"{prefix}to.next_step is not allowed on the last step (no next step)")
    elif isinstance(dst, FormatTo):
        errors += validate_format(dst.format, "to.format", prefix)
        if isinstance(dst.output, PushOutput):
            destination = dst.output.destination
            if _blank(destination.destination_type):
                errors.append(f"{prefix}to.output.push.destination.destination_type must not be empty")
            elif destination.destination_type == "uri":
                errors += _check_uri(destination.config.get("uri"), "to.output.push.destination.config.uri", prefix)
            if destination.auth is not None:
                errors += validate_auth(destination.auth, "to.output.push.destination", prefix)
    elif isinstance(dst, EntityTo):
        if _blank(dst.entity_definition):
            errors.append(f"{prefix}to.entity.entity_definition must not be empty")
        if _blank(dst.path):
            errors.append(f"{prefix}to.entity.path must not be empty")
        if dst.update_key is not None and not _is_safe(dst.update_key):
            errors.append(f"{prefix}to.entity.update_key '{dst.update_key}' is not a safe field name")
        if dst.identify is not None:
            errors += validate_filter(dst.identify, "to.entity.identify", prefix)
    return errors


def validate_semantic(dsl: WorkflowDSL) -> List[str]:
    """Structural checks; any entry here makes the workflow unrunnable."""
    if not dsl.steps:
        return ["Workflow must contain at least one step"]

    errors = []
    last = len(dsl.steps) - 1
    for idx, step in enumerate(dsl.steps):
        prefix = f"Step {idx}: "
        errors += validate_from(step, idx, prefix)
        errors += validate_transform(step, prefix)
        errors += validate_to(step, idx, last, prefix)
    return errors


def _transform_refs(step: StepDefinition) -> List[str]:
    t = step.transform
    if isinstance(t, CalculateTransform):
        operands = [t.left, t.right]
    elif isinstance(t, ConcatenateTransform):
        operands = t.parts
    else:
        return []
    return [op.field for op in operands if isinstance(op, FieldOperand)]


def _is_available(ref: str, names: Set[str]) -> bool:
    # "a.b" is covered by "a" (a whole object) and "a" by "a.b" (built object)
    if ref in names:
        return True
    return any(ref.startswith(n + ".") or n.startswith(ref + ".") for n in names)


def collect_warnings(dsl: WorkflowDSL) -> List[str]:
    """
    Soft check: field references no earlier step can produce.
    Only meaningful while every source so far has an explicit mapping;
    passthrough sources make the field set data-dependent, and from then
    on nothing is reported.
    """
    warnings = []
    available: Set[str] = set()

    for idx, step in enumerate(dsl.steps):
        src = step.from_
        if isinstance(src, PreviousStepFrom):
            if src.mapping:
                for source in src.mapping:
                    if not _is_available(source, available):
                        warnings.append(f"Step {idx}: previous_step field '{source}' is not produced by an earlier step")
                normalized = set(src.mapping.values())
            else:
                normalized = set()
        elif src.mapping:
            normalized = set(src.mapping.values())
        else:
            break

        scope = available | normalized
        for ref in _transform_refs(step):
            if not _is_available(ref, scope):
                warnings.append(f"Step {idx}: transform field '{ref}' may not be available")

        t = step.transform
        if isinstance(t, (CalculateTransform, ConcatenateTransform)):
            scope = scope | {t.target}

        if step.to.mapping:
            for normalized_field in step.to.mapping.values():
                if not _is_available(normalized_field, scope):
                    warnings.append(f"Step {idx}: to.mapping field '{normalized_field}' may not be available")
            available |= set(step.to.mapping.keys())
        else:
            available |= scope
    return warnings


def validate_or_raise(dsl: WorkflowDSL) -> None:
    errors = validate_semantic(dsl)
    if errors:
        raise ValidationError(errors)
