"""
OpenTelemetry wiring: resource, exporter selection and providers.

``cotacoes.telemetry.bootstrap`` (trace/metric start-up) is imported
explicitly by the application; it depends on ``cotacoes.logging``.
"""

from .exporters import resolve_endpoint
from .resource import build_resource, parse_resource_attributes

__all__ = ["build_resource", "parse_resource_attributes", "resolve_endpoint"]
