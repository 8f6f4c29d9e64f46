import argparse
import asyncio
import json
import sys

from recordflow.dsl.dsl_loader import load_and_validate_dsl
from recordflow.engine.workflow_engine import WorkflowEngine
from recordflow.errors import UnsupportedOperationError, ValidationError
from recordflow.hooks.dispatcher import HookDispatcher
from recordflow.hooks.log_hook import LogHook
from recordflow.hooks.metrics_hook import MetricsHook
from recordflow.io.json_file import JsonFileSource, NdjsonFileSink
from recordflow.observability.otel_tracing import init_tracer
from recordflow.utils.logger import log_error, log_info, setup_logging


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run a recordflow workflow over a JSON / NDJSON record file.")
    parser.add_argument("dsl", help="Path to the DSL file (JSON/YAML)")
    parser.add_argument("--input", required=True, help="JSON array or NDJSON file with input records")
    parser.add_argument("--output", help="NDJSON output file (default: stdout)")
    parser.add_argument("--schema", help="Optional JSON Schema to check the DSL against")
    parser.add_argument("--workers", type=int, help="Number of record workers")
    parser.add_argument("--log-level", default=None, help="Logging level (default from RECORDFLOW_LOG_LEVEL)")
    args = parser.parse_args(argv)

    if args.log_level:
        setup_logging(args.log_level.upper())
    else:
        setup_logging()
    init_tracer()

    try:
        dsl = load_and_validate_dsl(args.dsl, args.schema)
    except (ValidationError, UnsupportedOperationError) as e:
        log_error(f"❌ invalid workflow: {e}")
        return 2

    engine_kwargs = {"hook": HookDispatcher([LogHook(), MetricsHook()])}
    if args.workers:
        engine_kwargs["num_workers"] = args.workers
    engine = WorkflowEngine(**engine_kwargs)

    source = JsonFileSource(args.input)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as out:
            report = asyncio.run(engine.run(dsl, source, NdjsonFileSink(out)))
    else:
        report = asyncio.run(engine.run(dsl, source, NdjsonFileSink(sys.stdout)))

    log_info(f"run {report.run_id} finished: {report.status.value}")
    # records own stdout unless --output is given
    report_stream = sys.stdout if args.output else sys.stderr
    print(json.dumps(report.model_dump(mode="json"), indent=2, ensure_ascii=False), file=report_stream)
    return 0 if report.status.value == "success" else 1


if __name__ == "__main__":
    sys.exit(main())
