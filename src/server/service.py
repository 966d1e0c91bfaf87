from __future__ import annotations

import contextlib
import logging
import socket
import threading
from typing import Optional

from runtime.messages import ProtocolError

from .config import ServerConfig, bind_listener, remove_stale_socket
from .framing import decode_request, encode_response, read_frame
from .state import ServiceState

# How often blocked accept calls wake up to check for shutdown.
_ACCEPT_POLL_SECONDS = 0.2


class ServerError(Exception):
    """Raised when a listener fails in a way the service cannot recover from."""


class TimerServer:
    """Ticker, subscriber acceptor, and command loop around one ServiceState."""

    def __init__(
        self,
        config: ServerConfig,
        state: ServiceState,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._state = state
        self._logger = logger or logging.getLogger("timer_server")
        self._stop = threading.Event()
        self._threads: list[threading.Thread] = []
        self._updates_listener: Optional[socket.socket] = None
        self._commands_listener: Optional[socket.socket] = None
        self._fatal_error: Optional[BaseException] = None

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._commands_listener is not None and not self._stop.is_set()

    def start(self) -> None:
        if self.is_running:
            self._logger.warning("Timer server is already running")
            return

        self._stop.clear()
        self._fatal_error = None
        try:
            self._updates_listener = bind_listener(self._config.updates_socket)
            self._commands_listener = bind_listener(self._config.commands_socket)
        except OSError as error:
            self._close_listeners()
            raise ServerError(f"Could not bind timer sockets: {error}") from error

        self._updates_listener.settimeout(_ACCEPT_POLL_SECONDS)
        self._commands_listener.settimeout(_ACCEPT_POLL_SECONDS)

        self._threads = [
            threading.Thread(target=self._tick_loop, daemon=True, name="ticker"),
            threading.Thread(
                target=self._accept_subscribers,
                daemon=True,
                name="subscriber-acceptor",
            ),
        ]
        for thread in self._threads:
            thread.start()

        self._logger.info(
            "Timer server listening (updates=%s, commands=%s)",
            self._config.updates_socket,
            self._config.commands_socket,
        )

    def serve_forever(self) -> None:
        """Handle command connections one at a time until stopped."""
        listener = self._commands_listener
        if listener is None:
            raise ServerError("Timer server is not started")

        while not self._stop.is_set():
            try:
                conn, _ = listener.accept()
            except socket.timeout:
                continue
            except OSError as error:
                if self._stop.is_set():
                    break
                self._logger.error("Command listener failed: %s", error)
                self._fatal_error = error
                self._stop.set()
                break

            with conn:
                handled = self._handle_command(conn)
            if handled:
                self._state.update()

        if self._fatal_error is not None:
            raise ServerError(f"Timer server stopped: {self._fatal_error}") from self._fatal_error

    def run(self) -> None:
        self.start()
        try:
            self.serve_forever()
        finally:
            self.stop()

    def request_stop(self) -> None:
        """Ask the loops to exit; safe to call from signal handlers."""
        self._stop.set()

    def stop(self, timeout_seconds: float = 5.0) -> None:
        self._stop.set()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join(timeout=timeout_seconds)
                if thread.is_alive():
                    self._logger.error(
                        "Thread %s did not stop within %.1fs",
                        thread.name,
                        timeout_seconds,
                    )
        self._threads = []
        self._close_listeners()
        self._state.close()

    def _tick_loop(self) -> None:
        while not self._stop.wait(self._config.tick_interval_seconds):
            self._state.update()

    def _accept_subscribers(self) -> None:
        listener = self._updates_listener
        if listener is None:
            return

        while not self._stop.is_set():
            try:
                conn, _ = listener.accept()
            except socket.timeout:
                continue
            except OSError as error:
                if self._stop.is_set():
                    return
                self._logger.error("Updates listener failed: %s", error)
                self._fatal_error = error
                self._stop.set()
                return

            self._state.add_subscriber(conn)

    def _handle_command(self, conn: socket.socket) -> bool:
        """Answer one request; returns whether it reached the timer."""
        conn.settimeout(None)
        try:
            with conn.makefile("rb") as reader:
                request = decode_request(read_frame(reader))
        except ProtocolError as error:
            self._logger.warning("Closing command connection: %s", error)
            return False
        except OSError as error:
            self._logger.warning("Failed to read command request: %s", error)
            return False

        response = self._state.execute(request)
        try:
            conn.sendall(encode_response(response))
        except OSError as error:
            self._logger.warning("Failed to send command response: %s", error)
            return True

        with contextlib.suppress(OSError):
            conn.shutdown(socket.SHUT_RDWR)
        return True

    def _close_listeners(self) -> None:
        for listener, name in (
            (self._updates_listener, self._config.updates_socket),
            (self._commands_listener, self._config.commands_socket),
        ):
            if listener is None:
                continue
            with contextlib.suppress(OSError):
                listener.close()
            with contextlib.suppress(OSError):
                remove_stale_socket(name)
        self._updates_listener = None
        self._commands_listener = None
