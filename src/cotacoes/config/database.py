"""
Database Configuration.
"""

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class DatabaseSettings(BaseSettings):
    """Audit database connection and health-check configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    user: str = Field(default="postgres", validation_alias=AliasChoices("DB_USER"))
    password: SecretStr = Field(default=SecretStr("postgres"), validation_alias=AliasChoices("DB_PASSWORD"))
    host: str = Field(default="postgres", validation_alias=AliasChoices("DB_HOST"))
    port: int = Field(default=5432, validation_alias=AliasChoices("DB_PORT"))
    name: str = Field(default="cotacoes", validation_alias=AliasChoices("DB_NAME"))
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Max overflow connections")
    echo: bool = Field(default=False, description="Echo SQL statements")
    check_interval_ms: int = Field(
        default=5000,
        validation_alias=AliasChoices("DB_CHECK_INTERVAL_MS"),
        description="Connectivity probe interval",
    )

    @property
    def url(self) -> URL:
        return URL.create(
            "postgresql+asyncpg",
            username=self.user,
            password=self.password.get_secret_value(),
            host=self.host,
            port=self.port,
            database=self.name,
        )

    @property
    def check_interval(self) -> float:
        """Probe interval in seconds."""
        return self.check_interval_ms / 1000
