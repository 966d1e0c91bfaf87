"""Timer phase variants.

The phase is a closed union of three unrelated frozen dataclasses. Consumers
branch on the concrete type and treat anything else as a programming error.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union


@dataclass(frozen=True)
class Idle:
    """No active timer."""


@dataclass(frozen=True)
class Running:
    """Countdown in progress until `expiry` (local, timezone-aware)."""
    expiry: datetime
    command: Optional[str] = None


@dataclass(frozen=True)
class Paused:
    """Countdown frozen with `remaining` left; may be negative after a decrease."""
    remaining: timedelta
    command: Optional[str] = None


TimerPhase = Union[Idle, Running, Paused]

IDLE = Idle()


def is_active(phase: TimerPhase) -> bool:
    if isinstance(phase, (Running, Paused)):
        return True
    if isinstance(phase, Idle):
        return False
    raise TypeError(f"Unknown timer phase: {phase!r}")
