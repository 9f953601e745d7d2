"""
Core logging configuration and initialization logic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Sequence

import structlog
from opentelemetry import trace
from structlog.typing import EventDict, Processor, WrappedLogger

from cotacoes.telemetry.providers import build_logger_provider

from .severity import resolve_min_level
from .sinks import BaseSink, HecSink, OtelSink, StdioSink

if TYPE_CHECKING:
    from opentelemetry.sdk._logs import LoggerProvider

    from cotacoes.config import Settings


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(_name=name or "root")


# =============================================================================
# Structlog Processors
# =============================================================================


def add_trace_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add the active trace/span ids, if a span is active."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        event_dict["trace_id"] = format(span_context.trace_id, "032x")
        event_dict["span_id"] = format(span_context.span_id, "016x")
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.pop("_name", "root")
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename structlog's 'event' to 'message'."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


class SinkFanout:
    """Final processor: hands a private copy of the event to every sink.

    A sink that raises is reported on ``console`` (written directly, not
    through the logger) and the remaining sinks still receive the event.
    """

    def __init__(self, sinks: Sequence[BaseSink], console: StdioSink | None = None):
        self._sinks = list(sinks)
        self._console = console

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        for sink in self._sinks:
            try:
                sink.emit(dict(event_dict))
            except Exception as exc:
                self._report(sink, exc)
        return ""

    def _report(self, sink: BaseSink, exc: Exception) -> None:
        if self._console is None or self._console is sink:
            return
        self._console.write_error("Log sink failed", sink=type(sink).__name__, error=str(exc))


def build_processors(sinks: Sequence[BaseSink], console: StdioSink | None = None) -> list[Processor]:
    return [
        structlog.stdlib.add_log_level,
        add_trace_context,
        add_timestamp,
        add_logger_name,
        rename_event_key,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        SinkFanout(sinks, console),
    ]


# =============================================================================
# Runtime
# =============================================================================


@dataclass
class LoggingRuntime:
    """Process-scoped logging state: the logger, its sinks and the OTel provider."""

    logger: Any
    sinks: list[BaseSink]
    level: int = logging.INFO
    provider: LoggerProvider | None = None
    processors: list[Processor] = field(default_factory=list)
    _closed: bool = field(default=False, repr=False)

    def get_logger(self, name: str | None = None) -> Any:
        return self.logger.bind(_name=name or "root")

    def install(self) -> None:
        """Make this runtime the global structlog configuration."""
        structlog.configure(
            processors=self.processors,
            wrapper_class=structlog.make_filtering_bound_logger(self.level),
            context_class=dict,
            logger_factory=structlog.ReturnLoggerFactory(),
            cache_logger_on_first_use=False,
        )

    def shutdown(self) -> None:
        """Flush and close the provider and sinks. Best effort, never raises."""
        if self._closed:
            return
        self._closed = True
        if self.provider is not None:
            try:
                self.provider.shutdown()
            except Exception:
                pass
        for sink in self.sinks:
            try:
                sink.close()
            except Exception:
                pass


# =============================================================================
# Configuration Logic
# =============================================================================


def _build_runtime(
    sinks: list[BaseSink],
    level: int,
    provider: LoggerProvider | None = None,
    console: StdioSink | None = None,
) -> LoggingRuntime:
    processors = build_processors(sinks, console)
    logger = structlog.wrap_logger(
        structlog.ReturnLogger(),
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
    )
    return LoggingRuntime(logger=logger, sinks=sinks, level=level, provider=provider, processors=processors)


def _build_hec_sink(settings: Settings, console: StdioSink) -> HecSink | None:
    hec = settings.hec
    if not hec.enabled:
        return None
    sink = HecSink(
        hec.url,
        hec.token.get_secret_value(),
        service=settings.telemetry.service_name,
        source=hec.source,
        sourcetype=hec.sourcetype,
        host=hec.host,
        timeout=hec.timeout,
    )
    sink.on("error", lambda exc: console.write_error("HEC delivery failed", error=str(exc)))
    return sink


def configure_logging(settings: Settings | None = None, *, stream: Any = None, install: bool = True) -> LoggingRuntime:
    """
    Build the process logger.

    Sinks, in order: console (always), OTel collector pipeline (unless
    ``OTEL_LOGS_EXPORTER=none``), Splunk HEC (when URL and token are set).
    A failure while building the OTel pipeline falls back to a console-only
    logger and logs one warning; this function never raises.

    Args:
        settings: Composite settings; defaults to the module singleton
        stream: Console stream (default: stdout)
        install: Also install the runtime as the global structlog config and
            redirect stdlib logging into it
    """
    if settings is None:
        from cotacoes.config import settings as default_settings

        settings = default_settings

    level = resolve_min_level(settings.logging.level)
    console = StdioSink(stream=stream)
    hec_sink = _build_hec_sink(settings, console)

    provider = None
    otel_sink = None
    failure: Exception | None = None
    if settings.telemetry.logs_enabled:
        try:
            provider = build_logger_provider(settings.telemetry)
            otel_sink = OtelSink(provider.get_logger(settings.logging.logger_name))
        except Exception as exc:
            provider = None
            failure = exc

    sinks: list[BaseSink] = [console]
    if failure is None:
        if otel_sink is not None:
            sinks.append(otel_sink)
        if hec_sink is not None:
            sinks.append(hec_sink)

    runtime = _build_runtime(sinks, level, provider, console)
    if install:
        runtime.install()
        from .interceptors import install_stdlib_redirect

        install_stdlib_redirect(level)

    if failure is not None:
        runtime.get_logger("cotacoes.logging").warning("OTLP logs not initialized", error=str(failure))
    return runtime
