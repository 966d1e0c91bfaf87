from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    CompletionSettings,
    NotificationSettings,
    ServerSettings,
    TimerSettings,
)

CONFIG_ENV_VAR = "WAYBAR_TIMER_CONFIG"

__all__ = [
    "AppConfig",
    "AppConfigurationError",
    "CONFIG_ENV_VAR",
    "CompletionSettings",
    "NotificationSettings",
    "ServerSettings",
    "TimerSettings",
    "default_config_path",
    "load_app_config",
    "resolve_config_path",
]


def default_config_path() -> Path:
    config_home = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home).expanduser() / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE


def resolve_config_path(config_path: Optional[str] = None) -> tuple[Path, bool]:
    """Return the config path and whether it was requested explicitly."""
    raw = config_path or os.getenv(CONFIG_ENV_VAR)
    if not raw:
        return default_config_path(), False

    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path, True


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    path, explicit = resolve_config_path(config_path)
    if not path.exists():
        if explicit:
            raise AppConfigurationError(f"Config file not found: {path}")
        return AppConfig()
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    if not isinstance(raw, Mapping):
        raise AppConfigurationError("Root config TOML object must be a table.")

    return parse_app_config(raw, source_file=str(path))
