"""Dispatcher that executes command requests against the pomodoro timer."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from contracts.rpc_protocol import (
    ARG_COMMAND,
    ARG_SECONDS,
    VERB_CANCEL,
    VERB_INCREASE,
    VERB_SKIP,
    VERB_START,
    VERB_TOGGLEPAUSE,
)
from pomodoro import PomodoroTimer, TimerActionResult

from .messages import CommandRequest, CommandResponse, ProtocolError

_Handler = Callable[[PomodoroTimer, CommandRequest], TimerActionResult]

_HANDLERS: dict[str, _Handler] = {
    VERB_CANCEL: lambda timer, request: timer.cancel(),
    VERB_START: lambda timer, request: timer.start(request.args.get(ARG_COMMAND)),
    VERB_INCREASE: lambda timer, request: timer.increase(request.args[ARG_SECONDS]),
    VERB_TOGGLEPAUSE: lambda timer, request: timer.togglepause(),
    VERB_SKIP: lambda timer, request: timer.skip(),
}


class CommandDispatcher:
    """Routes one request to the matching timer operation."""
    def __init__(
        self,
        timer: PomodoroTimer,
        logger: Optional[logging.Logger] = None,
    ):
        self._timer = timer
        self._logger = logger or logging.getLogger("command_dispatch")

    def dispatch(self, request: CommandRequest) -> CommandResponse:
        handler = _HANDLERS.get(request.verb)
        if handler is None:
            raise ProtocolError(f"Unsupported verb: {request.verb!r}")

        result = handler(self._timer, request)
        if result.accepted:
            self._logger.debug("Command %s accepted: %s", request.verb, result.reason)
            return CommandResponse()

        # Expected outcome for the caller, not a service fault.
        self._logger.debug("Command %s rejected: %s", request.verb, result.reason)
        return CommandResponse(error=result.reason)
