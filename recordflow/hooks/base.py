from abc import ABC, abstractmethod
from typing import Optional
from recordflow.events.workflow_control import WorkflowControlType


class ExecutionHooks(ABC):
    """
    Lifecycle callbacks of one WorkflowEngine run.

        on_run_start       before validation, once per run
        on_record_success  after a record's output reached the sink
        on_record_fail     after a row-scoped error (conversion, missing field,
                           division by zero, sink write); the run goes on
        on_control_signal  the first time a cancel/terminate signal is seen
        on_run_end         once per run with the final RunStatus value,
                           also when validation rejected the workflow

    Record hooks are awaited from the worker that ran the record, so with
    several workers they interleave in no particular order.
    """

    @abstractmethod
    async def on_run_start(self, run_id: str): ...

    @abstractmethod
    async def on_record_success(self, run_id: str, record_index: int, output: dict): ...

    @abstractmethod
    async def on_record_fail(self, run_id: str, record_index: int, error: str): ...

    @abstractmethod
    async def on_run_end(self, run_id: str, status: str): ...

    @abstractmethod
    async def on_control_signal(self, run_id: str, signal: WorkflowControlType, reason: Optional[str] = None): ...
