import pytest

from recordflow.dsl.dsl_loader import parse_dsl_model
from recordflow.engine.run_report import RunStatus
from recordflow.engine.workflow_engine import WorkflowEngine
from recordflow.io.memory import InMemorySink, InMemorySource


class AsyncSource(InMemorySource):
    async def _iter(self):
        for r in self.records:
            yield r

    def fetch(self, from_def):
        return self._iter()


class AsyncSink(InMemorySink):
    async def write(self, to_def, record):
        super().write(to_def, record)


@pytest.mark.asyncio
async def test_run_success(chaining_workflow):
    sink = InMemorySink()
    source = InMemorySource([{"price": 10, "quantity": 3}, {"price": "2", "quantity": "5"}])
    report = await WorkflowEngine(num_workers=2).run(parse_dsl_model(chaining_workflow), source, sink, run_id="run-1")

    assert report.run_id == "run-1"
    assert report.status == RunStatus.SUCCESS
    assert report.processed == 2
    assert report.failed == 0
    totals = sorted(r["total_value"] for r in sink.records)
    assert totals == [10, 30]


@pytest.mark.asyncio
async def test_division_by_zero_only_fails_that_record(ratio_workflow):
    sink = InMemorySink()
    source = InMemorySource([{"a": 1, "b": 0}, {"a": 4, "b": 2}, {"a": 9, "b": 3}])
    report = await WorkflowEngine(num_workers=1).run(parse_dsl_model(ratio_workflow), source, sink)

    assert report.status == RunStatus.PARTIAL_FAILURE
    assert report.processed == 2
    assert report.failed == 1
    err = report.errors[0]
    assert err.record_index == 0
    assert err.step_index == 2
    assert err.error_type == "DivisionByZeroError"
    assert err.message == "Step 2: Division by zero in target field 'ratio'"
    assert sorted(r["ratio"] for r in sink.records) == [2, 3]


@pytest.mark.asyncio
async def test_structural_error_processes_nothing(dsl):
    workflow = parse_dsl_model({"steps": [dsl.step(dsl.previous_step(), dsl.api_to())]})
    sink = InMemorySink()
    report = await WorkflowEngine().run(workflow, InMemorySource([{"a": 1}]), sink)

    assert report.status == RunStatus.FAILED
    assert report.processed == 0
    assert report.validation_errors == ["Step 0 cannot use PreviousStep source"]
    assert sink.records == []


@pytest.mark.asyncio
async def test_conversion_error_is_reported(dsl):
    workflow = parse_dsl_model({
        "steps": [dsl.step(
            dsl.format_from({"price": "price"}),
            dsl.api_to(),
            dsl.calc("total", dsl.field("price"), "multiply", dsl.const(2)),
        )]
    })
    sink = InMemorySink()
    report = await WorkflowEngine(num_workers=1).run(workflow, InMemorySource([{"price": "abc"}, {"price": 1}]), sink)

    assert report.status == RunStatus.PARTIAL_FAILURE
    assert report.errors[0].error_type == "ConversionError"
    assert report.errors[0].message == "Field 'price': cannot convert string 'abc' to number"
    assert report.errors[0].step_index == 0
    assert sink.records == [{"price": 1, "total": 2}]


@pytest.mark.asyncio
async def test_sink_failure_is_row_scoped(dsl):
    workflow = parse_dsl_model({"steps": [dsl.step(dsl.format_from(), dsl.api_to())]})
    sink = InMemorySink(fail_when=lambda r: r["id"] == 1)
    report = await WorkflowEngine(num_workers=1).run(workflow, InMemorySource([{"id": 0}, {"id": 1}, {"id": 2}]), sink)

    assert report.failed == 1
    assert report.processed == 2
    assert report.errors[0].error_type == "WriteError"
    assert report.errors[0].record_index == 1


@pytest.mark.asyncio
async def test_async_source_and_sink(chaining_workflow):
    sink = AsyncSink()
    source = AsyncSource([{"price": 1, "quantity": 1}] * 5)
    report = await WorkflowEngine(num_workers=3).run(parse_dsl_model(chaining_workflow), source, sink)

    assert report.processed == 5
    assert len(sink.records) == 5


@pytest.mark.asyncio
async def test_cancel_between_records(dsl):
    workflow = parse_dsl_model({"steps": [dsl.step(dsl.format_from(), dsl.api_to())]})
    engine = WorkflowEngine(num_workers=1)

    class CancelAfterTwo(InMemorySink):
        def write(self, to_def, record):
            super().write(to_def, record)
            if len(self.written) == 2:
                engine.control.cancel("enough")

    sink = CancelAfterTwo()
    report = await engine.run(workflow, InMemorySource([{"id": i} for i in range(10)]), sink)

    assert report.canceled is True
    assert report.processed == 2
    assert len(sink.records) == 2
    assert report.status == RunStatus.SUCCESS


def test_run_sync(chaining_workflow):
    sink = InMemorySink()
    report = WorkflowEngine(num_workers=1).run_sync(
        parse_dsl_model(chaining_workflow), InMemorySource([{"price": 1, "quantity": 2}]), sink
    )
    assert report.status == RunStatus.SUCCESS
    assert sink.records[0]["total_value"] == 2


@pytest.mark.asyncio
async def test_empty_source(chaining_workflow):
    report = await WorkflowEngine().run(parse_dsl_model(chaining_workflow), InMemorySource([]), InMemorySink())
    assert report.status == RunStatus.SUCCESS
    assert report.processed == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_record", [{"x": 10**400}, [1, 2], "not a record"])
async def test_unconvertible_record_does_not_stop_the_run(dsl, bad_record):
    workflow = parse_dsl_model({"steps": [dsl.step(dsl.format_from(), dsl.api_to())]})
    sink = InMemorySink()
    report = await WorkflowEngine(num_workers=1).run(workflow, InMemorySource([bad_record, {"x": 1}]), sink)

    assert report.status == RunStatus.PARTIAL_FAILURE
    assert report.processed == 1
    assert report.failed == 1
    assert report.errors[0].record_index == 0
    assert report.errors[0].error_type == "ConversionError"
    assert report.errors[0].step_index == 0
    assert sink.records == [{"x": 1}]
