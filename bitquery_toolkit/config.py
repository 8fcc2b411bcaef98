"""
Configuration for bitquery_toolkit.

Settings are pydantic models. :class:`ConfigLoader` builds them from an
optional JSON or YAML file overlaid with environment variables.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, SecretStr, ValidationError

from .auth.oauth import DEFAULT_TOKEN_URL
from .exceptions import ConfigurationError
from .retry import RetryPolicy

DEFAULT_ENDPOINT = "https://streaming.bitquery.io/graphql"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ClientConfig(BaseModel):
    """Transport configuration for :class:`~bitquery_toolkit.client.BitqueryClient`."""

    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="GraphQL endpoint URL")
    token_url: str = Field(default=DEFAULT_TOKEN_URL, description="OAuth token endpoint URL")
    scope: str = Field(default="api", description="OAuth scope")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    retry: RetryPolicy = Field(default_factory=RetryPolicy)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    file_path: Optional[Path] = Field(default=None, description="Log file path")
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )


class Settings(BaseModel):
    """Complete toolkit settings."""

    client_id: Optional[str] = Field(default=None, description="OAuth client ID")
    client_secret: Optional[SecretStr] = Field(default=None, description="OAuth client secret")
    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigLoader:
    """Configuration loader for files and environment variables."""

    #: Environment variable -> path inside the settings mapping.
    ENV_MAPPINGS: Dict[str, Tuple[str, ...]] = {
        "BITQUERY_CLIENT_ID": ("client_id",),
        "BITQUERY_CLIENT_SECRET": ("client_secret",),
        "BITQUERY_ENDPOINT": ("client", "endpoint"),
        "BITQUERY_TOKEN_URL": ("client", "token_url"),
        "BITQUERY_TIMEOUT": ("client", "timeout"),
        "MAX_RETRIES": ("client", "retry", "max_retries"),
        "RETRY_DELAY": ("client", "retry", "retry_delay"),
        "BITQUERY_LOG_LEVEL": ("logging", "level"),
    }

    def __init__(self, environ: Optional[Dict[str, str]] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            environ: Environment mapping to read; defaults to ``os.environ``
        """
        self.environ = os.environ if environ is None else environ

    def load(self, config_file: Optional[Union[str, Path]] = None) -> Settings:
        """
        Load settings from a file and the environment.

        Environment variables override values from the file.

        Args:
            config_file: Optional ``.json``, ``.yaml`` or ``.yml`` file

        Returns:
            Validated Settings

        Raises:
            ConfigurationError: If the file cannot be parsed or a value is invalid
        """
        config_data: Dict[str, Any] = {}

        if config_file is not None:
            config_data = self._load_from_file(Path(config_file))

        config_data = self._deep_merge(config_data, self._load_from_environment())

        try:
            return Settings.model_validate(config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def _load_from_file(self, config_path: Path) -> Dict[str, Any]:
        """Parse configuration file based on extension."""
        suffix = config_path.suffix.lower()
        if suffix not in (".yaml", ".yml", ".json"):
            raise ConfigurationError(f"Unsupported config file format: {config_path.suffix}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to parse config file {config_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")
        return data

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        for env_var, config_path in self.ENV_MAPPINGS.items():
            value = self.environ.get(env_var)
            if value is None or value == "":
                continue

            current = config
            for key in config_path[:-1]:
                current = current.setdefault(key, {})
            # Values stay strings; pydantic coerces them to the field types.
            current[config_path[-1]] = value.upper() if env_var == "BITQUERY_LOG_LEVEL" else value

        return config

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_settings(config_file: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings with a default :class:`ConfigLoader`."""
    return ConfigLoader().load(config_file)
