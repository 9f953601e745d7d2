"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import asyncio
import sys
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

import httpx
import orjson
from opentelemetry import trace
from opentelemetry._logs import SeverityNumber
from opentelemetry.sdk._logs import LogRecord
from structlog.typing import EventDict

from .severity import map_severity

if TYPE_CHECKING:
    from opentelemetry.sdk._logs import Logger as OtelLogger

Callback = Callable[[], None]
Listener = Callable[..., None]


def orjson_dumps(v: Any, *, default: Any = str) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks.

    Sinks publish notifications to listeners registered with :meth:`on`:
    ``"logged"`` after a record has been handed off and ``"error"`` when a
    delivery fails. Neither ever raises into the logging call.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    @abstractmethod
    def emit(self, event_dict: EventDict, callback: Callback | None = None) -> None:
        """Emit a log event to the sink. ``callback`` fires once the record is handed off."""
        ...

    def close(self) -> None:
        """Close the sink and release resources."""

    def on(self, event: str, listener: Listener) -> None:
        self._listeners.setdefault(event, []).append(listener)

    def _notify(self, event: str, *args: Any) -> None:
        for listener in list(self._listeners.get(event, ())):
            listener(*args)

    def _notify_soon(self, event: str, *args: Any) -> None:
        """Notify on the next loop iteration, or right away when no loop is running."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._notify(event, *args)
            return
        loop.call_soon(self._notify, event, *args)


class StdioSink(BaseSink):
    """Standard I/O sink writing one JSON document per line.

    Args:
        stream: Output stream (default: stdout)
    """

    def __init__(self, stream: Any = None):
        super().__init__()
        self._stream = stream or sys.stdout

    def emit(self, event_dict: EventDict, callback: Callback | None = None) -> None:
        self._stream.write(orjson_dumps(event_dict) + "\n")
        self._stream.flush()
        if callback:
            callback()

    def write_error(self, message: str, **fields: Any) -> None:
        """Write a sink diagnostic directly, bypassing the logger pipeline."""
        self.emit({"level": "error", "message": message, "logger": "cotacoes.logging", **fields})


class OtelSink(BaseSink):
    """Forwards records into the OpenTelemetry collector pipeline.

    The record is handed to the SDK logger, whose batch processor owns the
    network I/O; this call only enqueues.
    """

    EXCLUDED_KEYS = frozenset({"level", "message", "timestamp"})

    def __init__(self, otel_logger: OtelLogger):
        super().__init__()
        self._otel_logger = otel_logger

    def build_record(self, event_dict: EventDict) -> LogRecord:
        severity = map_severity(event_dict.get("level"))
        attributes = {
            key: _coerce_attribute(value)
            for key, value in event_dict.items()
            if key not in self.EXCLUDED_KEYS and value is not None
        }
        span_context = trace.get_current_span().get_span_context()
        now = time.time_ns()
        return LogRecord(
            timestamp=now,
            observed_timestamp=now,
            trace_id=span_context.trace_id,
            span_id=span_context.span_id,
            trace_flags=span_context.trace_flags,
            severity_text=severity.text,
            severity_number=SeverityNumber(severity.number),
            body=event_dict.get("message"),
            resource=getattr(self._otel_logger, "resource", None),
            attributes=attributes,
        )

    def emit(self, event_dict: EventDict, callback: Callback | None = None) -> None:
        try:
            self._otel_logger.emit(self.build_record(event_dict))
        finally:
            self._notify_soon("logged", event_dict)
        if callback:
            callback()


class HecSink(BaseSink):
    """Posts records to a Splunk HTTP Event Collector.

    Inside a running event loop each POST is spawned as a task and never
    joined by the caller; outside a loop it runs to completion. Failures are
    published as ``"error"`` notifications and the record is dropped.
    """

    def __init__(
        self,
        url: str,
        token: str,
        *,
        service: str,
        source: str | None = None,
        sourcetype: str = "_json",
        host: str | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__()
        self._url = url
        self._token = token
        self._service = service
        self._source = source or service
        self._sourcetype = sourcetype
        self._host = host
        self._timeout = timeout
        self._transport = transport
        self._pending: set[asyncio.Task[None]] = set()

    def build_payload(self, event_dict: EventDict) -> dict[str, Any]:
        payload: dict[str, Any] = {"time": time.time()}
        if self._host:
            payload["host"] = self._host
        payload.update(
            {
                "source": self._source,
                "sourcetype": self._sourcetype,
                "event": {
                    "message": event_dict.get("message"),
                    "level": event_dict.get("level"),
                    "timestamp": event_dict.get("timestamp"),
                    "trace_id": event_dict.get("trace_id"),
                    "span_id": event_dict.get("span_id"),
                },
                "fields": {"service": self._service},
            }
        )
        return payload

    def emit(self, event_dict: EventDict, callback: Callback | None = None) -> None:
        payload = self.build_payload(event_dict)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._deliver(payload, callback))
            return
        task = loop.create_task(self._deliver(payload, callback))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, payload: dict[str, Any], callback: Callback | None) -> None:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self._url,
                    content=orjson.dumps(payload, default=str),
                    headers={
                        "Authorization": f"Splunk {self._token}",
                        "Content-Type": "application/json",
                    },
                )
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self._notify("error", exc)
        finally:
            if callback:
                callback()

    async def wait_pending(self) -> None:
        """Wait for in-flight POSTs. Shutdown does not call this."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._pending)


def _coerce_attribute(value: Any) -> Any:
    """Keep OTel primitive attribute values, JSON-encode everything else."""
    if isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        if all(isinstance(item, (str, bool, int, float)) for item in value):
            return list(value)
    if isinstance(value, Mapping) or isinstance(value, Sequence):
        return orjson_dumps(value)
    return str(value)
