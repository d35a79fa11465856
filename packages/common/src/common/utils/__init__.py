"""YAML + .env settings loading validated into frozen pydantic models."""

from common.utils.config_errors import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    MissingEnvironmentVariableError,
)
from common.utils.config_loader import ConfigLoader
from common.utils.settings_base import BaseSettings

__all__ = [
    "BaseSettings",
    "ConfigLoader",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "MissingEnvironmentVariableError",
]
