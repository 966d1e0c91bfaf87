"""Local clients for the updates and commands sockets."""

from __future__ import annotations

import contextlib
import socket
from typing import Optional, TextIO

from contracts.rpc_protocol import (
    ERROR_MESSAGES,
    ERROR_NO_TIMER_EXISTING,
    ERROR_OUT_OF_RANGE,
    ERROR_TIMER_ALREADY_EXISTING,
)
from runtime.messages import CommandRequest, CommandResponse

from .config import DEFAULT_COMMANDS_SOCKET, DEFAULT_UPDATES_SOCKET, connect
from .framing import decode_response, encode_request, read_frame


class TimerCommandError(Exception):
    """Domain failure reported by the timer service."""
    kind = ""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or ERROR_MESSAGES.get(self.kind, self.kind))


class NoTimerExisting(TimerCommandError):
    kind = ERROR_NO_TIMER_EXISTING


class TimerAlreadyExisting(TimerCommandError):
    kind = ERROR_TIMER_ALREADY_EXISTING


class OutOfRange(TimerCommandError):
    kind = ERROR_OUT_OF_RANGE


_ERRORS_BY_KIND: dict[str, type[TimerCommandError]] = {
    NoTimerExisting.kind: NoTimerExisting,
    TimerAlreadyExisting.kind: TimerAlreadyExisting,
    OutOfRange.kind: OutOfRange,
}


def raise_for_response(response: CommandResponse) -> None:
    if response.ok:
        return
    error_type = _ERRORS_BY_KIND.get(response.error or "", TimerCommandError)
    raise error_type()


class TimerClient:
    """Issues one request per connection against the commands socket."""

    def __init__(
        self,
        commands_socket: str = DEFAULT_COMMANDS_SOCKET,
        *,
        timeout_seconds: Optional[float] = 5.0,
    ):
        self._commands_socket = commands_socket
        self._timeout_seconds = timeout_seconds

    def call(self, request: CommandRequest) -> CommandResponse:
        with connect(self._commands_socket, self._timeout_seconds) as conn:
            conn.sendall(encode_request(request))
            with conn.makefile("rb") as reader:
                response = decode_response(read_frame(reader))
            with contextlib.suppress(OSError):
                conn.shutdown(socket.SHUT_RDWR)
        return response

    def cancel(self) -> None:
        raise_for_response(self.call(CommandRequest.cancel()))

    def start(self, command: Optional[str] = None) -> None:
        raise_for_response(self.call(CommandRequest.start(command)))

    def increase(self, seconds: int) -> None:
        raise_for_response(self.call(CommandRequest.increase(seconds)))

    def decrease(self, seconds: int) -> None:
        raise_for_response(self.call(CommandRequest.decrease(seconds)))

    def togglepause(self) -> None:
        raise_for_response(self.call(CommandRequest.togglepause()))

    def skip(self) -> None:
        raise_for_response(self.call(CommandRequest.skip()))


def follow_updates(
    output: TextIO,
    updates_socket: str = DEFAULT_UPDATES_SOCKET,
) -> None:
    """Copy status lines from the updates socket to `output` until disconnect."""
    with connect(updates_socket) as conn:
        conn.shutdown(socket.SHUT_WR)
        with conn.makefile("r", encoding="utf-8", newline="\n") as reader:
            for line in reader:
                output.write(line)
                output.flush()
