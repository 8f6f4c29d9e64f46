from typing import Any, Optional

from recordflow.config import ENABLE_PROMETHEUS
from recordflow.hooks.base import ExecutionHooks
from recordflow.observability.prometheus_metrics import CONTROL_SIGNALS, RECORDS_TOTAL, RUNS_TOTAL


class MetricsHook(ExecutionHooks):
    """Feeds run / record outcomes into prometheus counters."""

    def __init__(self, enabled: bool = ENABLE_PROMETHEUS):
        self.enabled = enabled

    async def on_run_start(self, run_id: str):
        pass

    async def on_record_success(self, run_id: str, record_index: int, output: Any):
        if self.enabled:
            RECORDS_TOTAL.labels(status="success").inc()

    async def on_record_fail(self, run_id: str, record_index: int, error: str):
        if self.enabled:
            RECORDS_TOTAL.labels(status="failed").inc()

    async def on_run_end(self, run_id: str, status: str):
        if self.enabled:
            RUNS_TOTAL.labels(status=getattr(status, "value", str(status))).inc()

    async def on_control_signal(self, run_id: str, signal_type, reason: Optional[str] = None):
        if self.enabled:
            CONTROL_SIGNALS.labels(signal=getattr(signal_type, "value", str(signal_type))).inc()
