"""
Splunk HTTP Event Collector (HEC) Configuration.

The HEC sink is attached only when both the URL and the token are present.
"""

from typing import Optional

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class HecSettings(BaseSettings):
    """External log-intake endpoint settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SPLUNK_HEC_URL"),
        description="Full collector URL, e.g. https://splunk:8088/services/collector/event",
    )
    token: Optional[SecretStr] = Field(default=None, validation_alias=AliasChoices("SPLUNK_HEC_TOKEN"))
    source: Optional[str] = Field(default=None, validation_alias=AliasChoices("SPLUNK_HEC_SOURCE"))
    sourcetype: str = Field(default="_json", validation_alias=AliasChoices("SPLUNK_HEC_SOURCETYPE"))
    host: Optional[str] = Field(default=None, validation_alias=AliasChoices("SPLUNK_HEC_HOST"))
    timeout: float = Field(default=5.0, description="POST timeout in seconds")

    @property
    def enabled(self) -> bool:
        return bool(self.url) and self.token is not None and bool(self.token.get_secret_value())
