"""Local socket server and clients for the waybar timer."""

from .client import (
    NoTimerExisting,
    OutOfRange,
    TimerAlreadyExisting,
    TimerClient,
    TimerCommandError,
    follow_updates,
)
from .config import ServerConfig, ServerConfigurationError
from .service import ServerError, TimerServer
from .state import ServiceState

__all__ = [
    "NoTimerExisting",
    "OutOfRange",
    "ServerConfig",
    "ServerConfigurationError",
    "ServerError",
    "ServiceState",
    "TimerAlreadyExisting",
    "TimerClient",
    "TimerCommandError",
    "TimerServer",
    "follow_updates",
]
