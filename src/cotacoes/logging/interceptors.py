"""
Interceptors for capturing standard library and third-party logs.
"""

import logging

from .core import get_logger

# Loggers whose records must never re-enter the pipeline. OpenTelemetry logs
# its own export failures; routing them to the collector sink would loop.
_IGNORED_PREFIXES = ("structlog", "opentelemetry")

# HTTP clients used by the sinks themselves. Every HEC post / OTLP export logs
# a request line here, so only WARNING and above are redirected.
_TRANSPORT_PREFIXES = ("httpx", "httpcore", "urllib3")

_THIRD_PARTY_ROOTS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "sqlalchemy",
)


class RedirectStdLibHandler(logging.Handler):
    """
    Redirect standard library logging events to structlog, so uvicorn and
    SQLAlchemy logs (and HTTP client warnings) pass through the same sinks.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if record.name.startswith(_IGNORED_PREFIXES):
                return
            if record.name.startswith(_TRANSPORT_PREFIXES) and record.levelno < logging.WARNING:
                return
            msg = self.format(record)
            logger = get_logger(self._simplify_logger_name(record.name))
            logger.log(record.levelno, msg)
        except Exception:
            self.handleError(record)

    @staticmethod
    def _simplify_logger_name(name: str) -> str:
        """
        - "uvicorn.access" -> "uvicorn.access"
        - "sqlalchemy.engine.Engine" -> "engine.Engine"
        """
        if not name:
            return "stdlib"
        parts = name.split(".")
        if len(parts) <= 2:
            return name
        return ".".join(parts[-2:])


def install_stdlib_redirect(level: int) -> None:
    """Replace root handlers with the redirect and detach known third-party handlers."""
    root_logger = logging.getLogger()
    root_logger.handlers = [h for h in root_logger.handlers if isinstance(h, RedirectStdLibHandler)]
    if not root_logger.handlers:
        root_logger.addHandler(RedirectStdLibHandler())
    root_logger.setLevel(level)

    for logger_name in _THIRD_PARTY_ROOTS:
        lg = logging.getLogger(logger_name)
        lg.handlers = []
        lg.propagate = True
