"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
No hardcoded values in code; all configuration comes from these sources.

Secrets (.env or environment):
    TOGGL_API_TOKEN

Settings (YAML):
    application.yaml   - App identity, API endpoint, retry policy, concurrency
    logging.yaml       - Logging configuration
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from toggl_cli.core.config_schema import ApplicationSchema, LoggingSchema
from toggl_cli.core.exceptions import ConfigurationError


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env or the environment. Only tokens."""

    toggl_api_token: str

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of causing cryptic KeyErrors later.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings (API endpoint, retry policy, concurrency)."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


def default_env_path() -> Path:
    """Location of the secrets file when --config is not given."""
    return find_project_root() / "config" / ".env"


@lru_cache
def get_settings(env_file: str | None = None) -> Settings:
    """
    Get cached secrets instance.

    Args:
        env_file: Path to a .env file. Defaults to config/.env under the project root.
            Environment variables take precedence over the file either way.

    Raises:
        ConfigurationError: If no API token is configured.
    """
    env_path = env_file or str(default_env_path())
    try:
        return Settings(_env_file=env_path)
    except ValidationError as e:
        raise ConfigurationError(
            f"TOGGL_API_TOKEN is not set in the environment or {env_path}"
        ) from e


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()
