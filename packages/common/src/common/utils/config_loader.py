from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeVar

import yaml
from common.utils.config_errors import (
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    MissingEnvironmentVariableError,
)
from common.utils.settings_base import BaseSettings
from dotenv import dotenv_values
from pydantic import ValidationError

T = TypeVar("T", bound=BaseSettings)

_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


class ConfigLoader:
    """
    Service-local config loader.

    Layout assumed (relative to service_root):
      config/default.yaml
      config/dev.yaml
      config/prod.yaml

    Layers, lowest precedence first:
      (1) base file: cli_config_path (--config), else the config_env_var
          environment variable (if provided), else config/default.yaml
      (2) config/{env}.yaml when env is provided and the file exists
      (3) programmatic overrides (e.g. values given on the command line)

    Placeholder expansion:
      ${VAR} resolved from .env (config dir first, then service root) and
      then os.environ. Expansion runs after merging, so an override can
      replace a placeholder that would otherwise be unresolvable.
    """

    def __init__(self, service_root: str | Path | None = None, config_dir: str = "config"):
        self.service_root = Path(service_root).resolve() if service_root else Path.cwd().resolve()
        config_dir_path = Path(config_dir)
        self.config_dir = (
            config_dir_path
            if config_dir_path.is_absolute()
            else (self.service_root / config_dir_path)
        ).resolve()

    def load(
        self,
        *,
        schema: type[T],
        env: str | None = None,
        cli_config_path: str | None = None,
        config_env_var: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> T:
        base_path = self._resolve_base_path(cli_config_path, config_env_var)
        merged: Any = self._read_yaml(base_path)

        if env:
            override_path = self.config_dir / f"{env}.yaml"
            if override_path.exists():
                merged = self._deep_merge(merged, self._read_yaml(override_path))

        if overrides:
            merged = self._deep_merge(merged, dict(overrides))

        merged = self._expand_vars(merged, self._resolve_dotenv_path())

        try:
            return schema.model_validate(merged)
        except ValidationError as e:
            raise ConfigValidationError(
                f"Validation failed for config loaded from '{base_path}'. {e}"
            ) from e

    # ----------------- internal helpers -----------------

    def _resolve_base_path(self, cli_config_path: str | None, config_env_var: str | None) -> Path:
        if cli_config_path:
            raw = Path(cli_config_path).expanduser()
            p = (raw if raw.is_absolute() else (self.service_root / raw)).resolve()
            if not p.exists():
                raise ConfigFileNotFoundError(f"--config file not found: {p}")
            return p

        env_path = os.getenv(config_env_var) if config_env_var else None
        if env_path:
            p = Path(env_path).expanduser().resolve()
            if not p.exists():
                raise ConfigFileNotFoundError(f"{config_env_var} points to missing file: {p}")
            return p

        if not self.config_dir.exists():
            raise ConfigFileNotFoundError(f"Config directory not found: {self.config_dir}")
        p = self.config_dir / "default.yaml"
        if not p.exists():
            raise ConfigFileNotFoundError(f"Default config not found: {p}")
        return p

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigFileNotFoundError(f"Cannot read config file: {path}. {e}") from e

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigParseError(f"Top-level YAML must be a mapping/object: {path}")
        return data

    def _deep_merge(self, base: Any, override: Any) -> Any:
        if isinstance(base, dict) and isinstance(override, dict):
            out = dict(base)
            for k, v in override.items():
                out[k] = self._deep_merge(out[k], v) if k in out else v
            return out
        # lists and scalars: replace
        return override

    def _resolve_dotenv_path(self) -> Path | None:
        for candidate in (self.config_dir / ".env", self.service_root / ".env"):
            if candidate.exists():
                return candidate
        return None

    def _expand_vars(self, obj: Any, dotenv_path: Path | None) -> Any:
        dotenv_vars: dict[str, str] = {}
        if dotenv_path:
            raw = dotenv_values(dotenv_path)
            dotenv_vars = {k: v for k, v in raw.items() if v is not None}

        def resolve(var: str, key_path: str) -> str:
            if var in dotenv_vars:
                return dotenv_vars[var]
            if var in os.environ:
                return os.environ[var]
            raise MissingEnvironmentVariableError(var, key_path)

        def walk(x: Any, path: str) -> Any:
            if isinstance(x, dict):
                return {k: walk(v, f"{path}.{k}") for k, v in x.items()}
            if isinstance(x, list):
                return [walk(v, f"{path}[{i}]") for i, v in enumerate(x)]
            if isinstance(x, str):

                def repl(m: re.Match[str]) -> str:
                    return resolve(m.group(1), path)

                return _VAR_PATTERN.sub(repl, x)
            return x

        return walk(obj, "root")
