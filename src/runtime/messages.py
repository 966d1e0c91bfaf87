"""Typed command requests and responses exchanged over the commands socket."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from contracts.rpc_protocol import (
    ARG_COMMAND,
    ARG_SECONDS,
    ERROR_KINDS,
    ERROR_MESSAGES,
    MAX_ADJUST_SECONDS,
    VERB_ARGUMENTS,
    VERB_CANCEL,
    VERB_INCREASE,
    VERB_SKIP,
    VERB_START,
    VERB_TOGGLEPAUSE,
)


class ProtocolError(Exception):
    """Raised when a request or response frame is malformed."""


@dataclass(frozen=True)
class CommandRequest:
    """A single verb with its validated arguments."""
    verb: str
    args: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        allowed = VERB_ARGUMENTS.get(self.verb)
        if allowed is None:
            raise ProtocolError(f"Unknown verb: {self.verb!r}")

        unexpected = sorted(set(self.args) - allowed)
        if unexpected:
            raise ProtocolError(
                f"Unexpected arguments for {self.verb}: {', '.join(unexpected)}"
            )

        if self.verb == VERB_START:
            command = self.args.get(ARG_COMMAND)
            if command is not None and not isinstance(command, str):
                raise ProtocolError("start.command must be a string or null")

        if self.verb == VERB_INCREASE:
            seconds = self.args.get(ARG_SECONDS)
            # bool is an int subclass but never a valid duration
            if isinstance(seconds, bool) or not isinstance(seconds, int):
                raise ProtocolError("increase.seconds must be an integer")
            if abs(seconds) > MAX_ADJUST_SECONDS:
                raise ProtocolError(
                    f"increase.seconds must not exceed {MAX_ADJUST_SECONDS} in magnitude"
                )

    @classmethod
    def cancel(cls) -> "CommandRequest":
        return cls(VERB_CANCEL)

    @classmethod
    def start(cls, command: Optional[str] = None) -> "CommandRequest":
        return cls(VERB_START, {ARG_COMMAND: command})

    @classmethod
    def increase(cls, seconds: int) -> "CommandRequest":
        return cls(VERB_INCREASE, {ARG_SECONDS: int(seconds)})

    @classmethod
    def decrease(cls, seconds: int) -> "CommandRequest":
        return cls(VERB_INCREASE, {ARG_SECONDS: -int(seconds)})

    @classmethod
    def togglepause(cls) -> "CommandRequest":
        return cls(VERB_TOGGLEPAUSE)

    @classmethod
    def skip(cls) -> "CommandRequest":
        return cls(VERB_SKIP)


@dataclass(frozen=True)
class CommandResponse:
    """Success, or a failure carrying one of the domain error kinds."""
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.error is not None and self.error not in ERROR_KINDS:
            raise ProtocolError(f"Unknown error kind: {self.error!r}")

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        if self.error is None:
            return "ok"
        return ERROR_MESSAGES[self.error]
