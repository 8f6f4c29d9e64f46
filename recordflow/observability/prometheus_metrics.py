"""
Prometheus metric definitions (multiprocess-ready)
--------------------------------------------------
• With PROMETHEUS_MULTIPROC_DIR=<dir> set, a dedicated registry aggregates
  the .db files every process writes.
• Otherwise the default global registry is used.
"""

import os

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    CollectorRegistry,
    multiprocess,
)

# ────────── Registry ───────────────────────────────────────
if os.getenv("PROMETHEUS_MULTIPROC_DIR"):
    _REGISTRY: CollectorRegistry | None = CollectorRegistry()
    multiprocess.MultiProcessCollector(_REGISTRY)
else:
    _REGISTRY = None  # default global registry
# ───────────────────────────────────────────────────────────

# ────────── Metric definitions ─────────────────────────────
_kwargs = {"registry": _REGISTRY} if _REGISTRY is not None else {}

RUNS_TOTAL = Counter(
    "recordflow_runs_total",
    "Workflow runs by final status",
    ["status"],
    **_kwargs,
)

RECORDS_TOTAL = Counter(
    "recordflow_records_total",
    "Records processed by outcome",
    ["status"],
    **_kwargs,
)

RECORD_DURATION = Histogram(
    "recordflow_record_duration_seconds",
    "Step chain evaluation + sink write per record (seconds)",
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1, 5),
    **_kwargs,
)

RECORDS_IN_FLIGHT = Gauge(
    "recordflow_records_in_flight",
    "Records currently held by a worker",
    **_kwargs,
)

CONTROL_SIGNALS = Counter(
    "recordflow_control_signals_total",
    "Control signals received by running workflows",
    ["signal"],
    **_kwargs,
)
# ───────────────────────────────────────────────────────────

