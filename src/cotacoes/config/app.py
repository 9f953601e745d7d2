"""
Application Configuration.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Basic process metadata."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    port: int = Field(default=3000, validation_alias=AliasChoices("PORT"))
    version: Optional[str] = Field(default=None, validation_alias=AliasChoices("SERVICE_VERSION"))
    environment: Optional[str] = Field(default=None, validation_alias=AliasChoices("DEPLOYMENT_ENVIRONMENT"))
