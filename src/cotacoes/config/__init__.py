"""
Cotacoes Configuration Module.

Nested settings pattern: each concern lives in its own sub-settings class and
reads its own environment keys. The composite is resolved lazily, once.

Usage:
    from cotacoes.config import settings

    settings.telemetry.service_name
    settings.logging.level
    settings.database.url
"""

from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict

from .app import AppSettings
from .database import DatabaseSettings
from .hec import HecSettings
from .logging import LoggingSettings
from .telemetry import TelemetrySettings


class Settings(BaseSettings):
    """Composite settings aggregating all configuration domains."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def app(self) -> AppSettings:
        return AppSettings()

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

    @cached_property
    def telemetry(self) -> TelemetrySettings:
        return TelemetrySettings()

    @cached_property
    def hec(self) -> HecSettings:
        return HecSettings()

    @cached_property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()


# Singleton instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "AppSettings",
    "DatabaseSettings",
    "HecSettings",
    "LoggingSettings",
    "TelemetrySettings",
]
