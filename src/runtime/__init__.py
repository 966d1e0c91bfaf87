"""Command dispatch and side-effect collaborators for the timer service."""

from .command_dispatch import CommandDispatcher
from .completion import ShellCommandRunner
from .messages import CommandRequest, CommandResponse, ProtocolError
from .notifications import NotifySendNotifier

__all__ = [
    "CommandDispatcher",
    "CommandRequest",
    "CommandResponse",
    "NotifySendNotifier",
    "ProtocolError",
    "ShellCommandRunner",
]
