import json
import logging
from typing import Any
from recordflow.hooks.base import ExecutionHooks

logger = logging.getLogger(__name__)


class LogHook(ExecutionHooks):
    async def on_run_start(self, run_id: str):
        logger.info(f"[{run_id}] 🚀 Run started")

    async def on_record_success(self, run_id: str, record_index: int, output: Any):
        logger.debug(f"[{run_id}] ✅ record {record_index} -> {json.dumps(output, ensure_ascii=False, default=str)}")

    async def on_record_fail(self, run_id: str, record_index: int, error: str):
        logger.warning(f"[{run_id}] ❌ record {record_index} failed: {error}")

    async def on_run_end(self, run_id: str, status: str):
        logger.info(f"[{run_id}] 🏁 Run ended with status: {status}")

    async def on_control_signal(self, run_id: str, signal_type: str, reason: str = None):
        logger.warning(f"[{run_id}] ⚠️ Control signal received: {signal_type} - Reason: {reason}")
