from typing import List
from recordflow.hooks.base import ExecutionHooks


class HookDispatcher(ExecutionHooks):
    """Forwards every lifecycle event to each hook, in registration order."""

    def __init__(self, hooks: List[ExecutionHooks]):
        self.hooks = hooks

    async def _emit(self, event: str, *args):
        for h in self.hooks:
            await getattr(h, event)(*args)

    async def on_run_start(self, run_id):
        await self._emit("on_run_start", run_id)

    async def on_record_success(self, run_id, record_index, output):
        await self._emit("on_record_success", run_id, record_index, output)

    async def on_record_fail(self, run_id, record_index, error):
        await self._emit("on_record_fail", run_id, record_index, error)

    async def on_run_end(self, run_id, status):
        await self._emit("on_run_end", run_id, status)

    async def on_control_signal(self, run_id, signal_type, reason=None):
        await self._emit("on_control_signal", run_id, signal_type, reason)
