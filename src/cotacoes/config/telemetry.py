"""
Telemetry Configuration.

Reads the standard OpenTelemetry environment variables. Everything here is
resolved once at startup; the models are frozen.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SERVICE_NAME = "api-cotacoes"


class TelemetrySettings(BaseSettings):
    """OTLP exporter, resource and per-signal selector settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    service_name: str = Field(
        default=DEFAULT_SERVICE_NAME,
        validation_alias=AliasChoices("OTEL_SERVICE_NAME", "SPLUNK_SERVICE_NAME"),
    )
    resource_attributes: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OTEL_RESOURCE_ATTRIBUTES"),
        description="Comma-separated key=value pairs",
    )

    # Exporter
    protocol: str = Field(default="http/protobuf", validation_alias=AliasChoices("OTEL_EXPORTER_OTLP_PROTOCOL"))
    endpoint: Optional[str] = Field(default=None, validation_alias=AliasChoices("OTEL_EXPORTER_OTLP_ENDPOINT"))
    logs_endpoint: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("OTEL_EXPORTER_OTLP_LOGS_ENDPOINT")
    )
    traces_endpoint: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT")
    )
    metrics_endpoint: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("OTEL_EXPORTER_OTLP_METRICS_ENDPOINT")
    )

    # Signal selectors ("none" disables the signal)
    logs_exporter: str = Field(default="otlp", validation_alias=AliasChoices("OTEL_LOGS_EXPORTER"))
    traces_exporter: str = Field(default="otlp", validation_alias=AliasChoices("OTEL_TRACES_EXPORTER"))
    metrics_exporter: str = Field(default="otlp", validation_alias=AliasChoices("OTEL_METRICS_EXPORTER"))

    @property
    def logs_enabled(self) -> bool:
        return self.logs_exporter.strip().lower() != "none"

    @property
    def traces_enabled(self) -> bool:
        return self.traces_exporter.strip().lower() != "none"

    @property
    def metrics_enabled(self) -> bool:
        return self.metrics_exporter.strip().lower() != "none"
