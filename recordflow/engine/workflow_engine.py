"""
workflow_engine.py -- drives one workflow run over every record of its source

    validate  ->  fetch (step 0 source)  ->  worker pool: execute_chain + sink.write
    -> RunReport (success / partial_failure / failed)
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
import uuid
from typing import Any, Dict, Optional, Tuple

from recordflow.config import ENABLE_PROMETHEUS, NUM_RECORD_WORKERS
from recordflow.dsl.dsl_model import WorkflowDSL
from recordflow.dsl.dsl_validator import collect_warnings, validate_semantic
from recordflow.engine.executor import execute_chain
from recordflow.engine.run_report import RunReport
from recordflow.errors import RowError, WriteError
from recordflow.events.workflow_control import ExecutionContext
from recordflow.hooks.base import ExecutionHooks
from recordflow.hooks.dispatcher import HookDispatcher
from recordflow.hooks.log_hook import LogHook
from recordflow.io.interfaces import IRecordSink, IRecordSource
from recordflow.observability.prometheus_metrics import RECORD_DURATION, RECORDS_IN_FLIGHT
from recordflow.observability.trace_utils import traced_span

logger = logging.getLogger(__name__)

_DONE = None  # queue sentinel


class WorkflowEngine:
    """
    Runs records through the step chain on a bounded pool of asyncio workers.
    Records carry no ordering guarantee relative to each other.
    """

    def __init__(
        self,
        hook: Optional[ExecutionHooks] = None,
        num_workers: int = NUM_RECORD_WORKERS,
        control: Optional[ExecutionContext] = None,
    ):
        self.hook = hook or HookDispatcher([LogHook()])
        self.num_workers = max(1, num_workers)
        self.control = control or ExecutionContext()
        self._signal_reported = False

    # ------------------------------------------------------------------ #
    #                           public helpers
    # ------------------------------------------------------------------ #
    async def run(
        self,
        dsl: WorkflowDSL,
        source: IRecordSource,
        sink: IRecordSink,
        run_id: Optional[str] = None,
    ) -> RunReport:
        run_id = run_id or str(uuid.uuid4())
        self._signal_reported = False
        report = RunReport(run_id=run_id)
        await self.hook.on_run_start(run_id)

        errors = validate_semantic(dsl)
        if errors:
            logger.error(f"[{run_id}] ❌ workflow rejected: {errors}")
            report.validation_errors = errors
            report.finalize()
            await self.hook.on_run_end(run_id, report.status.value)
            return report

        report.warnings = collect_warnings(dsl)
        for w in report.warnings:
            logger.warning(f"[{run_id}] {w}")

        queue: asyncio.Queue = asyncio.Queue(maxsize=self.num_workers * 2)
        tasks = [asyncio.create_task(self._produce(dsl, source, queue, report))]
        tasks += [
            asyncio.create_task(self._worker(dsl, source, sink, queue, report))
            for _ in range(self.num_workers)
        ]
        try:
            await asyncio.gather(*tasks)
        finally:
            for t in tasks:
                if not t.done():
                    t.cancel()

        report.finalize()
        logger.info(
            "[%s] 🏁 processed=%s failed=%s status=%s",
            run_id, report.processed, report.failed, report.status.value,
        )
        await self.hook.on_run_end(run_id, report.status.value)
        return report

    def run_sync(self, dsl: WorkflowDSL, source: IRecordSource, sink: IRecordSink,
                 run_id: Optional[str] = None) -> RunReport:
        return asyncio.run(self.run(dsl, source, sink, run_id))

    # ------------------------------------------------------------------ #
    #                          producer / workers
    # ------------------------------------------------------------------ #
    async def _stop_requested(self, report: RunReport) -> bool:
        if not self.control.should_stop():
            return False
        report.canceled = True
        if not self._signal_reported:
            self._signal_reported = True
            signal = self.control.last_signal
            await self.hook.on_control_signal(
                report.run_id,
                signal.control_type if signal else "Cancel",
                signal.reason if signal else None,
            )
        return True

    async def _produce(self, dsl: WorkflowDSL, source: IRecordSource,
                       queue: asyncio.Queue, report: RunReport) -> None:
        records = source.fetch(dsl.steps[0].from_)
        index = 0
        if hasattr(records, "__aiter__"):
            async for payload in records:
                if await self._stop_requested(report):
                    break
                await queue.put((index, payload))
                index += 1
        else:
            for payload in records:
                if await self._stop_requested(report):
                    break
                await queue.put((index, payload))
                index += 1

        for _ in range(self.num_workers):
            await queue.put(_DONE)

    async def _worker(self, dsl: WorkflowDSL, source: IRecordSource, sink: IRecordSink,
                      queue: asyncio.Queue, report: RunReport) -> None:
        while True:
            item: Optional[Tuple[int, Dict[str, Any]]] = await queue.get()
            if item is _DONE:
                return
            if await self._stop_requested(report):
                continue
            index, payload = item
            await self._process_record(dsl, source, sink, index, payload, report)

    async def _process_record(self, dsl: WorkflowDSL, source: IRecordSource, sink: IRecordSink,
                              index: int, payload: Dict[str, Any], report: RunReport) -> None:
        start = time.perf_counter()
        if ENABLE_PROMETHEUS:
            RECORDS_IN_FLIGHT.inc()
        try:
            async with traced_span("record", run_id=report.run_id, record_index=index):
                result = execute_chain(dsl, payload, lookup=source.lookup)
                output = result.to_dict()
                try:
                    written = sink.write(result.sink, output)
                    if inspect.isawaitable(written):
                        await written
                except Exception as exc:  # noqa: BLE001
                    raise WriteError(f"write failed: {exc}", len(dsl.steps) - 1) from exc

            report.processed += 1
            await self.hook.on_record_success(report.run_id, index, output)
        except RowError as e:
            logger.warning("[%s] record %s failed at step %s: %s", report.run_id, index, e.step_index, e.message)
            report.record_failure(index, type(e).__name__, e.message, e.step_index)
            await self.hook.on_record_fail(report.run_id, index, e.message)
        finally:
            if ENABLE_PROMETHEUS:
                RECORDS_IN_FLIGHT.dec()
                RECORD_DURATION.observe(time.perf_counter() - start)
