"""Configuration model and socket addressing for the timer service."""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass
from pathlib import Path

DEFAULT_UPDATES_SOCKET = "@waybar_timer_updates"
DEFAULT_COMMANDS_SOCKET = "@waybar_timer_commands"
DEFAULT_TICK_INTERVAL_SECONDS = 1.0
DEFAULT_SUBSCRIBER_WRITE_TIMEOUT_SECONDS = 0.5
ABSTRACT_PREFIX = "@"


class ServerConfigurationError(Exception):
    """Raised when timer server configuration is invalid."""


def is_abstract(name: str) -> bool:
    return name.startswith(ABSTRACT_PREFIX)


def socket_address(name: str) -> str:
    """Map `@name` to the Linux abstract namespace, anything else to a path."""
    if is_abstract(name):
        return "\0" + name[len(ABSTRACT_PREFIX):]
    return str(Path(name).expanduser())


def bind_listener(name: str, backlog: int = 16) -> socket.socket:
    address = socket_address(name)
    if not is_abstract(name):
        remove_stale_socket(name)
    listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        listener.bind(address)
        listener.listen(backlog)
    except OSError:
        listener.close()
        raise
    return listener


def connect(name: str, timeout_seconds: float | None = None) -> socket.socket:
    conn = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    conn.settimeout(timeout_seconds)
    try:
        conn.connect(socket_address(name))
    except OSError:
        conn.close()
        raise
    return conn


def remove_stale_socket(name: str) -> None:
    if is_abstract(name):
        return
    path = Path(socket_address(name))
    if path.is_socket():
        os.unlink(path)


@dataclass(frozen=True)
class ServerConfig:
    """Validated server configuration derived from app settings."""
    updates_socket: str = DEFAULT_UPDATES_SOCKET
    commands_socket: str = DEFAULT_COMMANDS_SOCKET
    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS
    subscriber_write_timeout_seconds: float = DEFAULT_SUBSCRIBER_WRITE_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        for field, value in (
            ("updates_socket", self.updates_socket),
            ("commands_socket", self.commands_socket),
        ):
            if not value.strip() or value.strip() == ABSTRACT_PREFIX:
                raise ServerConfigurationError(f"server.{field} cannot be empty")

        if self.updates_socket == self.commands_socket:
            raise ServerConfigurationError(
                "server.updates_socket and server.commands_socket must differ"
            )

        if self.tick_interval_seconds <= 0:
            raise ServerConfigurationError(
                f"server.tick_interval_seconds must be > 0, got: {self.tick_interval_seconds}"
            )

        if self.subscriber_write_timeout_seconds <= 0:
            raise ServerConfigurationError(
                "server.subscriber_write_timeout_seconds must be > 0, got: "
                f"{self.subscriber_write_timeout_seconds}"
            )

    @classmethod
    def from_settings(cls, settings) -> "ServerConfig":
        return cls(
            updates_socket=settings.updates_socket.strip(),
            commands_socket=settings.commands_socket.strip(),
            tick_interval_seconds=float(settings.tick_interval_seconds),
            subscriber_write_timeout_seconds=float(
                settings.subscriber_write_timeout_seconds
            ),
        )
