"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from typing import AbstractSet, Any, Mapping

from app_config_schema import (
    AppConfig,
    AppConfigurationError,
    CompletionSettings,
    NotificationSettings,
    ServerSettings,
    TimerSettings,
)
from pomodoro.constants import IDLE_CANCEL_POLICIES, START_WHEN_ACTIVE_POLICIES
from runtime.notifications import URGENCY_LEVELS

_KNOWN_SECTIONS = {"timer", "server", "notifications", "completion"}


def parse_app_config(raw: Mapping[str, Any], *, source_file: str) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    unknown = sorted(set(raw) - _KNOWN_SECTIONS)
    if unknown:
        joined = ", ".join(f"[{name}]" for name in unknown)
        raise AppConfigurationError(f"Unknown config sections: {joined}")

    return AppConfig(
        timer=_parse_timer_settings(_section(raw, "timer")),
        server=_parse_server_settings(_section(raw, "server")),
        notifications=_parse_notification_settings(_section(raw, "notifications")),
        completion=_parse_completion_settings(_section(raw, "completion")),
        source_file=source_file,
    )


def _parse_timer_settings(section: Mapping[str, Any]) -> TimerSettings:
    return TimerSettings(
        focus_minutes=_as_positive_int(
            section.get("focus_minutes", 25),
            "timer.focus_minutes",
        ),
        short_break_minutes=_as_positive_int(
            section.get("short_break_minutes", 5),
            "timer.short_break_minutes",
        ),
        long_break_minutes=_as_positive_int(
            section.get("long_break_minutes", 25),
            "timer.long_break_minutes",
        ),
        start_when_active=_as_choice(
            section.get("start_when_active", "toggle"),
            "timer.start_when_active",
            START_WHEN_ACTIVE_POLICIES,
        ),
        idle_cancel=_as_choice(
            section.get("idle_cancel", "reset"),
            "timer.idle_cancel",
            IDLE_CANCEL_POLICIES,
        ),
    )


def _parse_server_settings(section: Mapping[str, Any]) -> ServerSettings:
    return ServerSettings(
        updates_socket=_required_str(section, "updates_socket", "server", "@waybar_timer_updates"),
        commands_socket=_required_str(
            section,
            "commands_socket",
            "server",
            "@waybar_timer_commands",
        ),
        tick_interval_seconds=_as_float(
            section.get("tick_interval_seconds", 1.0),
            "server.tick_interval_seconds",
        ),
        subscriber_write_timeout_seconds=_as_float(
            section.get("subscriber_write_timeout_seconds", 0.5),
            "server.subscriber_write_timeout_seconds",
        ),
    )


def _parse_notification_settings(section: Mapping[str, Any]) -> NotificationSettings:
    return NotificationSettings(
        enabled=_as_bool(section.get("enabled", True), "notifications.enabled"),
        app_name=_required_str(section, "app_name", "notifications", "Waybar Timer"),
        urgency=_as_choice(
            section.get("urgency", "low"),
            "notifications.urgency",
            URGENCY_LEVELS,
        ),
        executable=_required_str(section, "executable", "notifications", "notify-send"),
    )


def _parse_completion_settings(section: Mapping[str, Any]) -> CompletionSettings:
    return CompletionSettings(
        shell=_required_str(section, "shell", "completion", "bash"),
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _required_str(
    section: Mapping[str, Any],
    field: str,
    section_name: str,
    default: str,
) -> str:
    text = _as_str(section.get(field, default), f"{section_name}.{field}")
    if not text:
        raise AppConfigurationError(f"{section_name}.{field} cannot be empty.")
    return text


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_choice(value: Any, field: str, allowed: AbstractSet[str]) -> str:
    text = _as_str(value, field).lower()
    if text not in allowed:
        joined = ", ".join(sorted(allowed))
        raise AppConfigurationError(f"{field} must be one of: {joined}.")
    return text


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_positive_int(value: Any, field: str) -> int:
    number = _as_int(value, field)
    if number <= 0:
        raise AppConfigurationError(f"{field} must be greater than zero.")
    return number


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")
