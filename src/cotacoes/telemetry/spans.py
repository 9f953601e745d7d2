"""
Span attribute helper.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from opentelemetry import trace

from cotacoes.logging.sinks import orjson_dumps

ATTRIBUTE_PREFIX = "app."


def set_span_attributes(attrs: Mapping[str, Any] | None) -> None:
    """Set ``app.``-prefixed attributes on the current span. ``None`` values are skipped."""
    span = trace.get_current_span()
    if not attrs or not span.is_recording():
        return
    for key, value in attrs.items():
        if value is None:
            continue
        name = key if key.startswith(ATTRIBUTE_PREFIX) else f"{ATTRIBUTE_PREFIX}{key}"
        if isinstance(value, Mapping):
            value = orjson_dumps(value)
        span.set_attribute(name, value)
