"""
OTLP exporter selection.

gRPC endpoints are used verbatim. HTTP endpoints follow the OTLP/HTTP path
convention: ``<base>/v1/<signal>``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Optional

from cotacoes.config.telemetry import TelemetrySettings

if TYPE_CHECKING:
    from opentelemetry.sdk._logs.export import LogExporter
    from opentelemetry.sdk.metrics.export import MetricExporter
    from opentelemetry.sdk.trace.export import SpanExporter

Signal = Literal["logs", "traces", "metrics"]


def is_grpc(protocol: Optional[str]) -> bool:
    return (protocol or "").strip().lower() == "grpc"


def resolve_endpoint(
    protocol: Optional[str],
    endpoint: Optional[str],
    signal_endpoint: Optional[str] = None,
    signal: Signal = "logs",
) -> Optional[str]:
    """
    Resolve the exporter URL for one signal.

    The signal-specific endpoint wins over the generic one. Returns ``None``
    when nothing is configured so the exporter can apply its own default.
    """
    chosen = signal_endpoint or endpoint
    if not chosen:
        return None
    if is_grpc(protocol):
        return chosen
    normalized = chosen.rstrip("/")
    suffix = f"/v1/{signal}"
    if normalized.endswith(suffix):
        return normalized
    return f"{normalized}{suffix}"


def _endpoint_kwargs(url: Optional[str]) -> dict[str, str]:
    return {"endpoint": url} if url else {}


def create_log_exporter(settings: TelemetrySettings) -> LogExporter:
    url = resolve_endpoint(settings.protocol, settings.endpoint, settings.logs_endpoint, "logs")
    if is_grpc(settings.protocol):
        from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
    else:
        from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
    return OTLPLogExporter(**_endpoint_kwargs(url))


def create_span_exporter(settings: TelemetrySettings) -> SpanExporter:
    url = resolve_endpoint(settings.protocol, settings.endpoint, settings.traces_endpoint, "traces")
    if is_grpc(settings.protocol):
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    else:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    return OTLPSpanExporter(**_endpoint_kwargs(url))


def create_metric_exporter(settings: TelemetrySettings) -> MetricExporter:
    url = resolve_endpoint(settings.protocol, settings.endpoint, settings.metrics_endpoint, "metrics")
    if is_grpc(settings.protocol):
        from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
    else:
        from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
    return OTLPMetricExporter(**_endpoint_kwargs(url))
