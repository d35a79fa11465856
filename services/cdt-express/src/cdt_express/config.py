from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from common.utils import BaseSettings, ConfigLoader
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

SERVICE_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ENV_VAR = "CDT_EXPRESS_CONFIG"

LoggingLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ServiceConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(default="cdt-express-mcp", description="Service name")
    version: str = Field(default="0.3.1", description="Service version")


class ApiConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, hide_input_in_errors=True)

    base_url: str = Field(default="https://api.riskthinking.ai", description="CDT Express API base URL")
    api_key: SecretStr = Field(..., description="Bearer token sent with every request")
    timeout_seconds: float | None = Field(
        default=None, gt=0, description="Per-request timeout; unset waits indefinitely"
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("api_key must not be empty")
        return v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class PaginationConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_pages: int | None = Field(
        default=None, ge=1, description="Cap on pages per exhaustive walk; unset means no cap"
    )


class ServerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    transport: Literal["stdio", "http"] = Field(default="stdio")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    level: LoggingLevel = Field(default="INFO")

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    api: ApiConfig
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(
    *,
    env: str | None = None,
    config_path: str | None = None,
    api_key: str | None = None,
    service_root: Path = SERVICE_ROOT,
) -> Settings:
    """
    Load settings from config/default.yaml (+ config/<env>.yaml).

    An api_key given here (e.g. from the command line) wins over the
    ${CDT_API_KEY} placeholder in the YAML files.
    """
    overrides: Mapping[str, Any] | None = {"api": {"api_key": api_key}} if api_key else None
    return ConfigLoader(service_root=service_root).load(
        schema=Settings,
        env=env,
        cli_config_path=config_path,
        config_env_var=CONFIG_ENV_VAR,
        overrides=overrides,
    )
