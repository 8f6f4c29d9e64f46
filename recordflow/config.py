import os

# Feature toggles
ENABLE_PROMETHEUS: bool = os.getenv("ENABLE_PROMETHEUS", "true").lower() == "true"
ENABLE_OTEL: bool = os.getenv("ENABLE_OTEL", "false").lower() == "true"

# OpenTelemetry exporter endpoint
OTEL_EXPORTER_ENDPOINT: str = os.getenv(
    "OTEL_EXPORTER_OTLP_ENDPOINT",
    "http://localhost:4318/v1/traces",
)
OTEL_SERVICE_NAME: str = os.getenv("OTEL_SERVICE_NAME", "recordflow")

# Record worker pool
NUM_RECORD_WORKERS: int = int(os.getenv("RECORDFLOW_NUM_WORKERS", "4"))

LOG_LEVEL: str = os.getenv("RECORDFLOW_LOG_LEVEL", "INFO").upper()
