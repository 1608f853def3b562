# Import instrumenters so they register themselves.
from .otel import OpenTelemetry, OpenTelemetrySpans

__all__ = ["OpenTelemetry", "OpenTelemetrySpans"]
