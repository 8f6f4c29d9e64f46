from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class RunStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL_FAILURE = "partial_failure"
    FAILED = "failed"


class RecordError(BaseModel):
    record_index: int
    step_index: Optional[int] = None
    error_type: str
    message: str


class RunReport(BaseModel):
    run_id: str
    status: RunStatus = RunStatus.SUCCESS
    processed: int = 0
    failed: int = 0
    canceled: bool = False
    errors: List[RecordError] = Field(default_factory=list)
    validation_errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    def record_failure(self, record_index: int, error_type: str, message: str, step_index: Optional[int] = None) -> None:
        self.failed += 1
        self.errors.append(RecordError(
            record_index=record_index,
            step_index=step_index,
            error_type=error_type,
            message=message,
        ))

    def finalize(self) -> "RunReport":
        if self.validation_errors:
            self.status = RunStatus.FAILED
        elif self.failed:
            self.status = RunStatus.PARTIAL_FAILURE
        else:
            self.status = RunStatus.SUCCESS
        self.errors.sort(key=lambda e: e.record_index)
        return self
