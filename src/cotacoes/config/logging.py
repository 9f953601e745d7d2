"""
Logging Configuration.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging infrastructure configuration.

    ``level`` accepts both the winston-style names used by the rest of the
    stack (error, warn, info, http, verbose, debug, silly) and the stdlib ones.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    level: str = Field(default="info", validation_alias=AliasChoices("LOG_LEVEL"), description="Minimum log level")
    logger_name: str = Field(default="app-logger", description="Instrumentation scope of the OTel logger")
