from .contracts import CommandRunner, Notifier, NullCommandRunner, NullNotifier
from .phases import Idle, Paused, Running, TimerPhase, is_active
from .render import StatusPayload, render_status
from .service import (
    CycleSchedule,
    PomodoroTimer,
    TimerAction,
    TimerActionResult,
    TimerSnapshot,
)

__all__ = [
    "CommandRunner",
    "CycleSchedule",
    "Idle",
    "Notifier",
    "NullCommandRunner",
    "NullNotifier",
    "Paused",
    "PomodoroTimer",
    "Running",
    "StatusPayload",
    "TimerAction",
    "TimerActionResult",
    "TimerPhase",
    "TimerSnapshot",
    "is_active",
    "render_status",
]
