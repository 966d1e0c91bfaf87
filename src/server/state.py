"""Lock-guarded timer and subscriber set shared by all server threads."""

from __future__ import annotations

import contextlib
import logging
import socket
import threading
from typing import Optional

from pomodoro import PomodoroTimer, TimerSnapshot
from runtime.command_dispatch import CommandDispatcher
from runtime.messages import CommandRequest, CommandResponse

from .config import DEFAULT_SUBSCRIBER_WRITE_TIMEOUT_SECONDS


class ServiceState:
    """Owns the timer and the update subscribers behind one exclusive lock."""

    def __init__(
        self,
        timer: PomodoroTimer,
        *,
        write_timeout_seconds: float = DEFAULT_SUBSCRIBER_WRITE_TIMEOUT_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        self._timer = timer
        self._dispatcher = CommandDispatcher(timer, logger=logger)
        self._write_timeout_seconds = write_timeout_seconds
        self._logger = logger or logging.getLogger("timer_server")
        self._lock = threading.Lock()
        self._subscribers: list[socket.socket] = []

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def snapshot(self) -> TimerSnapshot:
        with self._lock:
            return self._timer.snapshot()

    def update(self) -> None:
        with self._lock:
            self._update_locked()

    def add_subscriber(self, conn: socket.socket) -> None:
        """Register an output-only subscriber and push the current state to it."""
        with contextlib.suppress(OSError):
            conn.shutdown(socket.SHUT_RD)
        conn.settimeout(self._write_timeout_seconds)
        with self._lock:
            self._subscribers.append(conn)
            self._logger.info("Subscriber connected (total=%d)", len(self._subscribers))
            self._update_locked()

    def execute(self, request: CommandRequest) -> CommandResponse:
        """Dispatch one request; the caller broadcasts once it has replied."""
        with self._lock:
            return self._dispatcher.dispatch(request)

    def close(self) -> None:
        with self._lock:
            subscribers, self._subscribers = self._subscribers, []
        for conn in subscribers:
            with contextlib.suppress(OSError):
                conn.close()

    def _update_locked(self) -> None:
        message = self._timer.tick_and_render().to_line().encode("utf-8")

        healthy: list[socket.socket] = []
        for conn in self._subscribers:
            try:
                conn.sendall(message)
            except OSError as error:
                self._logger.info("Dropping subscriber after failed write: %s", error)
                with contextlib.suppress(OSError):
                    conn.close()
                continue
            healthy.append(conn)
        self._subscribers = healthy
