"""
Resource construction for all telemetry signals.
"""

from __future__ import annotations

from opentelemetry.sdk.resources import SERVICE_NAME, Resource

from cotacoes.config.telemetry import TelemetrySettings


def parse_resource_attributes(raw: str | None) -> dict[str, str]:
    """
    Parse ``OTEL_RESOURCE_ATTRIBUTES`` style input.

    ``"a=1,b=2"`` -> ``{"a": "1", "b": "2"}``. Entries without ``=`` or with an
    empty key are skipped; ``"k="`` yields an empty string value.
    """
    if not raw:
        return {}
    attrs: dict[str, str] = {}
    for pair in raw.split(","):
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        attrs[key] = value.strip()
    return attrs


def build_resource(settings: TelemetrySettings) -> Resource:
    """SDK default resource merged with the service name and user attributes."""
    return Resource.create({}).merge(
        Resource(
            {
                SERVICE_NAME: settings.service_name,
                **parse_resource_attributes(settings.resource_attributes),
            }
        )
    )
