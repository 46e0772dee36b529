"""OpenTelemetry helpers for metrics instrumentation."""

from opentelemetry import metrics
from opentelemetry.metrics import Histogram
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader


_meter_provider_initialized = False


def init_metrics() -> None:
    """Initialize OpenTelemetry metrics with a console exporter."""
    global _meter_provider_initialized
    if _meter_provider_initialized:
        return
    reader = PeriodicExportingMetricReader(ConsoleMetricExporter())
    provider = MeterProvider(metric_readers=[reader])
    metrics.set_meter_provider(provider)
    _meter_provider_initialized = True


def get_tool_call_histogram(export_to_console: bool = False) -> Histogram:
    """
    Return a histogram for tools/call durations.

    Without a configured meter provider the OpenTelemetry API hands out a
    no-op instrument, so recording is always safe.
    """
    if export_to_console:
        init_metrics()
    meter = metrics.get_meter("shopify_mcp_server")
    return meter.create_histogram(
        name="mcp.tools.call.duration",
        unit="ms",
        description="Duration of MCP tool calls",
    )
