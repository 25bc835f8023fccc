"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field
from sqlalchemy.engine import make_url

DEV_FRONTEND_ORIGIN = "http://localhost:5173"


class CORSConfig(BaseModel):
    """Cross-origin allow-list for the application."""

    frontend_url: str | None = Field(
        default=None, description="Origin of the deployed frontend (FRONTEND_URL)"
    )
    dev_origin: str | None = Field(
        default=DEV_FRONTEND_ORIGIN, description="Local development frontend origin"
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])

    @computed_field
    @property
    def origins(self) -> list[str]:
        """Origins accepted for cross-origin requests."""
        return [
            origin.rstrip("/")
            for origin in (self.frontend_url, self.dev_origin)
            if origin
        ]


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./products.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")
    fail_fast: bool = Field(
        default=False,
        description="Abort startup when the database cannot be reached",
    )
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @property
    def backend(self) -> str:
        """Dialect name of the configured database, e.g. ``sqlite``."""
        return make_url(self.url).get_backend_name()

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"

    @property
    def password(self) -> str | None:
        """Resolve the database password.

        A secrets file wins over an environment variable, which wins over a
        password embedded in the URL.
        """
        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e
        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if not password:
                raise ValueError(
                    f"Environment variable {self.password_env_var} not set"
                )
            return password
        return make_url(self.url).password

    @property
    def connection_string(self) -> str:
        """Construct the database connection string with the resolved password."""
        base_url = make_url(self.url)
        resolved_password = self.password

        if resolved_password and resolved_password != base_url.password:
            if base_url.password:
                logger.warning(
                    "Database password from secrets does not match the one in the URL. "
                    "Using password from secrets."
                )
            base_url = base_url.set(password=resolved_password)

        return base_url.render_as_string(hide_password=False)


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    docs_enabled: bool = Field(
        default=True, description="Serve the interactive API reference at /docs"
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
