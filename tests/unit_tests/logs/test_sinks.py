"""
Sink transport unit tests: stdio, OTel collector pipeline and Splunk HEC.
"""

from __future__ import annotations

import asyncio
import io
import json

import httpx
import pytest
from opentelemetry._logs import SeverityNumber
from opentelemetry.sdk.trace import TracerProvider

from cotacoes.logging.sinks import HecSink, OtelSink, StdioSink

HEC_URL = "https://splunk.local:8088/services/collector/event"


class FakeOtelLogger:
    resource = None

    def __init__(self, fail: bool = False) -> None:
        self.records = []
        self.fail = fail

    def emit(self, record) -> None:
        if self.fail:
            raise RuntimeError("processor shut down")
        self.records.append(record)


def _event(**extra):
    return {
        "level": "error",
        "message": "Quote lookup failed",
        "timestamp": "2026-10-19T12:00:00+00:00",
        "logger": "cotacoes.api",
        **extra,
    }


# ================================
# StdioSink
# ================================


class TestStdioSink:
    def test_writes_one_json_line(self) -> None:
        stream = io.StringIO()
        done = []

        StdioSink(stream=stream).emit(_event(endpoint="/cotacao/dolar"), callback=lambda: done.append(True))

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        doc = json.loads(lines[0])
        assert doc["message"] == "Quote lookup failed"
        assert doc["endpoint"] == "/cotacao/dolar"
        assert done == [True]

    def test_write_error_bypasses_logger(self) -> None:
        stream = io.StringIO()
        StdioSink(stream=stream).write_error("HEC delivery failed", error="timeout")

        doc = json.loads(stream.getvalue())
        assert doc["level"] == "error"
        assert doc["error"] == "timeout"


# ================================
# OtelSink
# ================================


class TestOtelSink:
    def test_maps_severity_body_and_attributes(self) -> None:
        otel_logger = FakeOtelLogger()
        sink = OtelSink(otel_logger)

        sink.emit(_event(nome="Maria Santos", categoria="Gold", valor=12.5))

        (record,) = otel_logger.records
        assert record.severity_text == "ERROR"
        assert record.severity_number == SeverityNumber.ERROR
        assert record.body == "Quote lookup failed"
        attributes = dict(record.attributes)
        assert attributes["nome"] == "Maria Santos"
        assert attributes["valor"] == 12.5
        assert attributes["logger"] == "cotacoes.api"
        for key in ("level", "message", "timestamp"):
            assert key not in attributes

    def test_non_primitive_attributes_are_json_encoded(self) -> None:
        otel_logger = FakeOtelLogger()
        OtelSink(otel_logger).emit(_event(request={"date": "2022-10-18"}, skipped=None))

        attributes = dict(otel_logger.records[0].attributes)
        assert json.loads(attributes["request"]) == {"date": "2022-10-18"}
        assert "skipped" not in attributes

    def test_tags_active_trace_context(self) -> None:
        tracer = TracerProvider().get_tracer(__name__)
        sink = OtelSink(FakeOtelLogger())

        with tracer.start_as_current_span("GET /cotacao/euro") as span:
            record = sink.build_record(_event())

        span_context = span.get_span_context()
        assert record.trace_id == span_context.trace_id
        assert record.span_id == span_context.span_id

    def test_callback_fires_after_handoff(self) -> None:
        otel_logger = FakeOtelLogger()
        seen = []

        OtelSink(otel_logger).emit(_event(), callback=lambda: seen.append(len(otel_logger.records)))

        assert seen == [1]

    @pytest.mark.asyncio
    async def test_logged_notification_is_deferred_to_next_tick(self) -> None:
        sink = OtelSink(FakeOtelLogger())
        seen = []
        sink.on("logged", lambda event_dict: seen.append(event_dict["message"]))

        sink.emit(_event())
        assert seen == []

        await asyncio.sleep(0)
        assert seen == ["Quote lookup failed"]

    def test_logged_notification_fires_even_if_handoff_fails(self) -> None:
        sink = OtelSink(FakeOtelLogger(fail=True))
        seen = []
        sink.on("logged", lambda event_dict: seen.append(event_dict))

        with pytest.raises(RuntimeError):
            sink.emit(_event())

        assert len(seen) == 1


# ================================
# HecSink
# ================================


class TestHecPayload:
    def test_payload_shape(self) -> None:
        sink = HecSink(HEC_URL, "tok", service="api-cotacoes", source="backend", host="api-1")

        payload = sink.build_payload(_event(trace_id="a" * 32, span_id="b" * 16))

        assert payload["event"]["level"] == "error"
        assert payload["event"]["message"] == "Quote lookup failed"
        assert payload["event"]["timestamp"] == "2026-10-19T12:00:00+00:00"
        assert payload["event"]["trace_id"] == "a" * 32
        assert payload["event"]["span_id"] == "b" * 16
        assert payload["fields"] == {"service": "api-cotacoes"}
        assert payload["source"] == "backend"
        assert payload["sourcetype"] == "_json"
        assert payload["host"] == "api-1"
        assert isinstance(payload["time"], float)

    def test_host_is_optional_and_source_defaults_to_service(self) -> None:
        payload = HecSink(HEC_URL, "tok", service="api-cotacoes").build_payload(_event())

        assert "host" not in payload
        assert payload["source"] == "api-cotacoes"
        assert payload["event"]["trace_id"] is None


class TestHecDelivery:
    @pytest.mark.asyncio
    async def test_posts_with_splunk_authorization(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"text": "Success", "code": 0})

        sink = HecSink(HEC_URL, "tok", service="api-cotacoes", transport=httpx.MockTransport(handler))
        done = []

        sink.emit(_event(), callback=lambda: done.append(True))
        assert sink.pending == 1
        await sink.wait_pending()

        assert done == [True]
        (request,) = requests
        assert request.method == "POST"
        assert str(request.url) == HEC_URL
        assert request.headers["Authorization"] == "Splunk tok"
        body = json.loads(request.content)
        assert body["event"]["level"] == "error"
        assert body["fields"]["service"] == "api-cotacoes"
        assert sink.pending == 0

    @pytest.mark.asyncio
    async def test_transport_failure_still_completes(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        sink = HecSink(HEC_URL, "tok", service="api-cotacoes", transport=httpx.MockTransport(handler))
        done, errors = [], []
        sink.on("error", errors.append)

        sink.emit(_event(), callback=lambda: done.append(True))
        await sink.wait_pending()

        assert done == [True]
        assert len(errors) == 1
        assert isinstance(errors[0], httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_http_error_status_is_reported(self) -> None:
        sink = HecSink(
            HEC_URL,
            "bad-token",
            service="api-cotacoes",
            transport=httpx.MockTransport(lambda request: httpx.Response(403, json={"text": "Invalid token"})),
        )
        done, errors = [], []
        sink.on("error", errors.append)

        sink.emit(_event(), callback=lambda: done.append(True))
        await sink.wait_pending()

        assert done == [True]
        assert isinstance(errors[0], httpx.HTTPStatusError)

    def test_malformed_url_is_reported(self) -> None:
        sink = HecSink("http://[::1", "tok", service="api-cotacoes")
        done, errors = [], []
        sink.on("error", errors.append)

        sink.emit(_event(), callback=lambda: done.append(True))

        assert done == [True]
        assert len(errors) == 1
        assert isinstance(errors[0], httpx.InvalidURL)

    def test_without_event_loop_delivers_inline(self) -> None:
        requests = []
        sink = HecSink(
            HEC_URL,
            "tok",
            service="api-cotacoes",
            transport=httpx.MockTransport(lambda request: requests.append(request) or httpx.Response(200)),
        )
        done = []

        sink.emit(_event(), callback=lambda: done.append(True))

        assert len(requests) == 1
        assert done == [True]
