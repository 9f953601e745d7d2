"""
OpenTelemetry provider factories.

Targets one SDK interface (``LoggerProvider.add_log_record_processor``); see
the version pin in pyproject.toml.
"""

from __future__ import annotations

from typing import Optional

from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor, LogExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from cotacoes.config.telemetry import TelemetrySettings

from .exporters import create_log_exporter, create_metric_exporter, create_span_exporter
from .resource import build_resource


def build_logger_provider(
    settings: TelemetrySettings,
    *,
    resource: Optional[Resource] = None,
    exporter: Optional[LogExporter] = None,
) -> LoggerProvider:
    """Logger provider with one batch processor in front of the OTLP log exporter."""
    provider = LoggerProvider(resource=resource or build_resource(settings))
    provider.add_log_record_processor(BatchLogRecordProcessor(exporter or create_log_exporter(settings)))
    return provider


def build_tracer_provider(settings: TelemetrySettings, *, resource: Optional[Resource] = None) -> TracerProvider:
    provider = TracerProvider(resource=resource or build_resource(settings))
    provider.add_span_processor(BatchSpanProcessor(create_span_exporter(settings)))
    return provider


def build_meter_provider(settings: TelemetrySettings, *, resource: Optional[Resource] = None) -> MeterProvider:
    reader = PeriodicExportingMetricReader(create_metric_exporter(settings))
    return MeterProvider(resource=resource or build_resource(settings), metric_readers=[reader])
