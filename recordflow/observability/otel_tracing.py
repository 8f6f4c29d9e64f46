"""OpenTelemetry tracer initialization."""

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

from recordflow.config import ENABLE_OTEL, OTEL_EXPORTER_ENDPOINT, OTEL_SERVICE_NAME

_initialized = False


def init_tracer(service_name: str = OTEL_SERVICE_NAME) -> bool:
    """Install the OTLP tracer provider once; returns whether tracing is active."""
    global _initialized
    if not ENABLE_OTEL:
        return False
    if _initialized:
        return True

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=OTEL_EXPORTER_ENDPOINT))
    )
    trace.set_tracer_provider(provider)
    _initialized = True
    return True
