"""Environment-only settings used when no config.yaml is present."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.product_api.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    CORSConfig,
    DatabaseConfig,
    LoggingConfig,
)


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Environment and deployment
    environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    log_level: str = Field(default="INFO")

    # Infrastructure URLs
    database_url: str = Field(
        default="sqlite:///./products.db", validation_alias="DATABASE_URL"
    )
    frontend_url: str | None = Field(default=None, validation_alias="FRONTEND_URL")

    def to_config(self) -> ConfigData:
        """Build a full configuration from the environment values."""
        return ConfigData(
            app=AppConfig(
                environment=self.environment,
                cors=CORSConfig(frontend_url=self.frontend_url),
            ),
            database=DatabaseConfig(url=self.database_url),
            logging=LoggingConfig(level=self.log_level),
        )
