import json
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union
from jsonschema import Draft7Validator
from pydantic import ValidationError as PydanticValidationError

from recordflow.dsl.dsl_model import WorkflowDSL
from recordflow.errors import UnsupportedOperationError, ValidationError


class SchemaValidationError(ValidationError):
    pass


def load_dsl_file(file_path: Union[str, Path]) -> dict:
    path = Path(file_path)
    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix in ['.yaml', '.yml']:
            return yaml.safe_load(f)
        elif path.suffix == '.json':
            return json.load(f)
        else:
            raise ValueError(f"Unsupported file type: {path.suffix}")


def workflow_json_schema() -> Dict[str, Any]:
    return WorkflowDSL.model_json_schema(by_alias=True)


def validate_with_schema(data: dict, schema_path: Optional[Union[str, Path]] = None) -> None:
    """Check raw DSL data against a JSON Schema file, or the model's own schema."""
    if schema_path is None:
        schema = workflow_json_schema()
    else:
        schema = json.loads(Path(schema_path).read_text(encoding='utf-8'))
    validator = Draft7Validator(schema)
    errors = list(validator.iter_errors(data))
    if errors:
        raise SchemaValidationError([f"{e.message} at {list(e.path)}" for e in errors])


def _translate(e: PydanticValidationError) -> Exception:
    messages = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err["loc"])
        if err["type"] == "union_tag_invalid":
            tag = err.get("ctx", {}).get("tag")
            return UnsupportedOperationError(f"Unsupported variant '{tag}' at {loc}")
        messages.append(f"{loc}: {err['msg']}")
    return ValidationError(messages)


def parse_dsl_model(data: dict) -> WorkflowDSL:
    if not isinstance(data, dict):
        raise ValidationError(["DSL document must be an object"])
    try:
        return WorkflowDSL.model_validate(data)
    except PydanticValidationError as e:
        raise _translate(e) from e


def parse_dsl_json(dsl_json: str) -> WorkflowDSL:
    try:
        return WorkflowDSL.model_validate_json(dsl_json)
    except PydanticValidationError as e:
        raise _translate(e) from e


def load_and_validate_dsl(file_path: Union[str, Path], schema_path: Optional[Union[str, Path]] = None) -> WorkflowDSL:
    dsl_raw = load_dsl_file(file_path)
    if schema_path is not None:
        validate_with_schema(dsl_raw, schema_path)
    return parse_dsl_model(dsl_raw)
