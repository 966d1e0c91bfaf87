"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_CONFIG_DIR = "waybar-timer"
DEFAULT_CONFIG_FILE = "config.toml"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class TimerSettings:
    """Cycle durations and command policies from `[timer]`."""
    focus_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 25
    start_when_active: str = "toggle"
    idle_cancel: str = "reset"


@dataclass(frozen=True)
class ServerSettings:
    """Socket names and loop timing from `[server]`."""
    updates_socket: str = "@waybar_timer_updates"
    commands_socket: str = "@waybar_timer_commands"
    tick_interval_seconds: float = 1.0
    subscriber_write_timeout_seconds: float = 0.5


@dataclass(frozen=True)
class NotificationSettings:
    """Desktop notification settings from `[notifications]`."""
    enabled: bool = True
    app_name: str = "Waybar Timer"
    urgency: str = "low"
    executable: str = "notify-send"


@dataclass(frozen=True)
class CompletionSettings:
    """Completion command settings from `[completion]`."""
    shell: str = "bash"


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    timer: TimerSettings = field(default_factory=TimerSettings)
    server: ServerSettings = field(default_factory=ServerSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    completion: CompletionSettings = field(default_factory=CompletionSettings)
    source_file: str = ""
