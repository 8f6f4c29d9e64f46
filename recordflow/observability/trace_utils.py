"""Span helpers for record processing."""

import contextlib
from opentelemetry import trace
from recordflow.config import ENABLE_OTEL

_ATTR_TYPES = (str, bool, int, float)


@contextlib.asynccontextmanager
async def traced_span(name: str, **attrs):
    """Async context manager that opens a span when tracing is enabled.

    None attributes are skipped; other non-primitive values are stringified.
    """
    if not ENABLE_OTEL:
        yield None
        return

    tracer = trace.get_tracer("recordflow")
    with tracer.start_as_current_span(name) as span:
        for k, v in attrs.items():
            if v is None:
                continue
            span.set_attribute(f"recordflow.{k}", v if isinstance(v, _ATTR_TYPES) else str(v))
        yield span
