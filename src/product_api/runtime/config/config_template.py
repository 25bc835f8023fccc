"""Configuration template substitution utilities."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.product_api.runtime.config.config_data import ConfigData

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """

    def replacer(match: re.Match[str]) -> str:
        var_expr = match.group(1)

        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name) or default

        if ":?" in var_expr:
            var_name, error_msg = var_expr.split(":?", 1)
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name}: {error_msg}")
            return value

        value = os.getenv(var_expr)
        if value is None:
            raise ValueError(f"Required environment variable {var_expr} not set")
        return value

    return _PLACEHOLDER.sub(replacer, text)


def apply_environment_overrides(env_mode: str) -> None:
    """Promote ``<ENV>_NAME`` variables to ``NAME`` for the active environment.

    ``PRODUCTION_DATABASE_URL`` becomes ``DATABASE_URL`` when running in
    production, so one shell can carry settings for several environments.
    """
    prefix = f"{env_mode.upper()}_"
    for var_name, var_value in list(os.environ.items()):
        if var_name.startswith(prefix) and len(var_name) > len(prefix):
            new_var_name = var_name[len(prefix):]
            os.environ[new_var_name] = var_value
            logger.debug("Set environment variable {} from {}", new_var_name, var_name)


def load_templated_yaml(file_path: Path) -> ConfigData:
    """
    Load a YAML file with environment variable substitution.

    Args:
        file_path: Path to the YAML file

    Returns:
        Parsed YAML with environment variables substituted

    Raises:
        ValueError: If required environment variables are missing or the
            file does not describe a valid configuration
        FileNotFoundError: If the YAML file doesn't exist
    """
    with open(file_path) as f:
        content = f.read()

    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    logger.info("Loading configuration for environment: {}", env_mode)
    apply_environment_overrides(env_mode)

    substituted_content = substitute_env_vars(content)

    try:
        loaded = yaml.safe_load(substituted_content)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not isinstance(loaded, dict):
        raise ValueError("Failed to parse YAML")

    try:
        # Only the 'config' section is application configuration
        return ConfigData(**(loaded.get("config") or {}))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
