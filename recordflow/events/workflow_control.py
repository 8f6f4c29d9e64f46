from enum import Enum
from typing import Optional
from dataclasses import dataclass, field
from datetime import datetime, UTC


class WorkflowControlType(str, Enum):
    Cancel = "Cancel"
    Terminate = "Terminate"


@dataclass
class WorkflowControlSignal:
    control_type: WorkflowControlType
    reason: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


class ExecutionContext:
    """Cooperative cancellation flag, checked by the engine between records."""

    def __init__(self):
        self._canceled = False
        self._terminated = False
        self.last_signal: Optional[WorkflowControlSignal] = None

    def apply_control(self, signal: WorkflowControlSignal):
        self.last_signal = signal
        if signal.control_type == WorkflowControlType.Cancel:
            self._canceled = True
        elif signal.control_type == WorkflowControlType.Terminate:
            self._terminated = True

    def cancel(self, reason: Optional[str] = None):
        self.apply_control(WorkflowControlSignal(WorkflowControlType.Cancel, reason))

    def is_canceled(self) -> bool:
        return self._canceled

    def is_terminated(self) -> bool:
        return self._terminated

    def should_stop(self) -> bool:
        return self._canceled or self._terminated

