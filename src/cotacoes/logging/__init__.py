"""
Unified Logging Service for Cotacoes.

Provides structured logging with multiple sink support:
- stdio: JSON lines on standard output
- otel: OpenTelemetry collector pipeline (batch processor -> OTLP exporter)
- hec: Splunk HTTP Event Collector

Design Pattern: Strategy Pattern for sink abstraction.
Library: structlog + orjson for JSON serialization.
"""

from .core import LoggingRuntime, configure_logging, get_logger
from .severity import Severity, map_severity, resolve_min_level

__all__ = [
    "LoggingRuntime",
    "Severity",
    "configure_logging",
    "get_logger",
    "map_severity",
    "resolve_min_level",
]
