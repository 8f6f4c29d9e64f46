from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple, Union, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class DSLBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# -----------------------------
# Shared config blocks
# -----------------------------

class NoAuth(DSLBase):
    type: Literal["none"]


class ApiKeyAuth(DSLBase):
    type: Literal["api_key"]
    key: str = ""
    header_name: str = "X-API-Key"


class BasicAuth(DSLBase):
    type: Literal["basic_auth"]
    username: str = ""
    password: str = ""


class PreSharedKeyAuth(DSLBase):
    type: Literal["pre_shared_key"]
    key: str = ""
    location: Literal["header", "body"] = "header"
    field_name: str = ""


class EntityJwtAuth(DSLBase):
    type: Literal["entity_jwt"]
    required_claims: Optional[Dict[str, Any]] = None


AuthConfig = Annotated[
    Union[NoAuth, ApiKeyAuth, BasicAuth, PreSharedKeyAuth, EntityJwtAuth],
    Field(discriminator="type"),
]


class SourceConfig(DSLBase):
    source_type: str
    config: Dict[str, Any] = Field(default_factory=dict)
    auth: Optional[AuthConfig] = None


class DestinationConfig(DSLBase):
    destination_type: str
    config: Dict[str, Any] = Field(default_factory=dict)
    auth: Optional[AuthConfig] = None


class FormatConfig(DSLBase):
    format_type: str
    options: Dict[str, Any] = Field(default_factory=dict)


class EntityFilter(DSLBase):
    field: Optional[str] = None
    operator: Optional[str] = None
    value: Any = None


# -----------------------------
# From (where a step reads)
# -----------------------------

class FromBase(DSLBase):
    # {source_field: normalized_field}; empty means passthrough
    mapping: Dict[str, str] = Field(default_factory=dict)

    def mapping_pairs(self) -> List[Tuple[str, str]]:
        return list(self.mapping.items())


class FormatFrom(FromBase):
    type: Literal["format"]
    source: SourceConfig
    format: FormatConfig


class EntityFrom(FromBase):
    type: Literal["entity"]
    entity_definition: str
    filter: Optional[EntityFilter] = None


class PreviousStepFrom(FromBase):
    type: Literal["previous_step"]


FromDef = Annotated[
    Union[FormatFrom, EntityFrom, PreviousStepFrom],
    Field(discriminator="type"),
]


# -----------------------------
# Transform
# -----------------------------

class FieldOperand(DSLBase):
    kind: Literal["field"]
    field: str


class ConstOperand(DSLBase):
    kind: Literal["const", "literal", "const_string"]
    value: Any = None


Operand = Annotated[Union[FieldOperand, ConstOperand], Field(discriminator="kind")]


class ArithmeticOp(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"


_OP_ALIASES = {
    "sub": "subtract",
    "mul": "multiply",
    "div": "divide",
    "+": "add",
    "-": "subtract",
    "*": "multiply",
    "/": "divide",
}


class NoneTransform(DSLBase):
    type: Literal["none"]


class CalculateTransform(DSLBase):
    type: Literal["calculate", "arithmetic"]
    target: str
    op: ArithmeticOp
    left: Operand
    right: Operand

    @field_validator("op", mode="before")
    @classmethod
    def normalize_op(cls, v):
        if isinstance(v, str):
            return _OP_ALIASES.get(v.lower(), v.lower())
        return v


class ConcatenateTransform(DSLBase):
    type: Literal["concatenate", "concat"]
    target: str
    parts: List[Operand] = Field(default_factory=list)
    separator: Optional[str] = ""

    @model_validator(mode="before")
    @classmethod
    def left_right_to_parts(cls, data):
        # two-operand form: {left, right}
        if isinstance(data, dict) and "parts" not in data and ("left" in data or "right" in data):
            data = dict(data)
            data["parts"] = [p for p in (data.pop("left", None), data.pop("right", None)) if p is not None]
        return data

    @field_validator("separator", mode="after")
    @classmethod
    def default_separator(cls, v):
        return v or ""


Transform = Annotated[
    Union[NoneTransform, CalculateTransform, ConcatenateTransform],
    Field(discriminator="type"),
]


# -----------------------------
# To (where a step writes)
# -----------------------------

class DownloadOutput(DSLBase):
    mode: Literal["download"]


class ApiOutput(DSLBase):
    mode: Literal["api"]


class PushOutput(DSLBase):
    mode: Literal["push"]
    destination: DestinationConfig
    method: Optional[Literal["GET", "POST", "PUT", "PATCH", "DELETE"]] = None


OutputMode = Annotated[
    Union[DownloadOutput, ApiOutput, PushOutput],
    Field(discriminator="mode"),
]


class EntityWriteMode(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    CREATE_OR_UPDATE = "create_or_update"


class ToBase(DSLBase):
    # {destination_field: normalized_field}; empty means passthrough
    mapping: Dict[str, str] = Field(default_factory=dict)

    def mapping_pairs(self) -> List[Tuple[str, str]]:
        """(normalized_field, destination_field) pairs, ready for apply_mapping."""
        return [(normalized, destination) for destination, normalized in self.mapping.items()]


class FormatTo(ToBase):
    type: Literal["format"]
    output: OutputMode
    format: FormatConfig


class EntityTo(ToBase):
    type: Literal["entity"]
    entity_definition: str
    path: str
    mode: EntityWriteMode = EntityWriteMode.CREATE
    identify: Optional[EntityFilter] = None
    update_key: Optional[str] = None


class NextStepTo(ToBase):
    type: Literal["next_step"]


ToDef = Annotated[
    Union[FormatTo, EntityTo, NextStepTo],
    Field(discriminator="type"),
]


# -----------------------------
# Step & Workflow
# -----------------------------

class StepDefinition(DSLBase):
    from_: FromDef = Field(alias="from")
    transform: Transform = Field(default_factory=lambda: NoneTransform(type="none"))
    to: ToDef


class WorkflowDSL(DSLBase):
    name: Optional[str] = None
    comment: Optional[str] = None
    version: Optional[str] = None
    steps: List[StepDefinition]

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
