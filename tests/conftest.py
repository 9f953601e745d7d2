import logging
from types import SimpleNamespace

import pytest
import structlog

from cotacoes.config import AppSettings, DatabaseSettings, HecSettings, LoggingSettings, TelemetrySettings


@pytest.fixture
def make_settings():
    """
    Build a composite settings object from explicit sub-settings.

    Unspecified telemetry defaults to OTEL_LOGS_EXPORTER=none so tests never
    construct a real exporter unless they ask for one.
    """

    def _make(*, logging_kw=None, telemetry_kw=None, hec_kw=None, app_kw=None, database_kw=None):
        telemetry_kw = {"logs_exporter": "none", "traces_exporter": "none", "metrics_exporter": "none", **(telemetry_kw or {})}
        return SimpleNamespace(
            logging=LoggingSettings(**(logging_kw or {})),
            telemetry=TelemetrySettings(**telemetry_kw),
            hec=HecSettings(**{"url": None, "token": None, **(hec_kw or {})}),
            app=AppSettings(**(app_kw or {})),
            database=DatabaseSettings(**(database_kw or {})),
        )

    return _make


@pytest.fixture(autouse=True)
def restore_logging_globals():
    """Undo structlog.configure() and root handler changes made by a test."""
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    structlog.reset_defaults()
    root_logger.handlers = handlers
    root_logger.setLevel(level)


class RecordingLogger:
    """Minimal structlog-like logger that records (method, event, fields)."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict]] = []

    def _record(self, method: str):
        def log(event: str, **fields) -> None:
            self.calls.append((method, event, fields))

        return log

    def __getattr__(self, method: str):
        if method in {"debug", "info", "warning", "error", "critical"}:
            return self._record(method)
        raise AttributeError(method)

    def events(self, method: str | None = None) -> list[str]:
        return [event for m, event, _ in self.calls if method is None or m == method]


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()
