"""Pure mapping from timer state to the status line read by waybar."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timedelta

from contracts.status_protocol import (
    CLASS_BREAK,
    CLASS_FOCUS,
    CLASS_IDLE,
    EXPIRY_TIME_FORMAT,
    FIELD_ALT,
    FIELD_CLASS,
    FIELD_TEXT,
    FIELD_TOOLTIP,
    TAG_PAUSED,
    TAG_RUNNING,
    TAG_STANDBY,
    TOOLTIP_EXPIRES_FORMAT,
    TOOLTIP_IDLE,
    TOOLTIP_PAUSED,
)

from .phases import Idle, Paused, Running, TimerPhase


@dataclass(frozen=True)
class StatusPayload:
    """One status update for the waybar custom module."""
    text: str
    alt: str
    tooltip: str
    css_class: str

    def as_dict(self) -> dict[str, str]:
        return {
            FIELD_TEXT: self.text,
            FIELD_ALT: self.alt,
            FIELD_TOOLTIP: self.tooltip,
            FIELD_CLASS: self.css_class,
        }

    def to_line(self) -> str:
        """Serialize as a single newline-terminated JSON object."""
        return json.dumps(self.as_dict()) + "\n"


def cycle_class(cycles: int) -> str:
    return CLASS_FOCUS if cycles % 2 == 0 else CLASS_BREAK


def expiry_tooltip(expiry: datetime) -> str:
    return TOOLTIP_EXPIRES_FORMAT.format(time=expiry.strftime(EXPIRY_TIME_FORMAT))


def minutes_left(time_left: timedelta) -> int:
    """Whole minutes left plus one, so a fresh 25 minute timer shows 25."""
    seconds = max(0.0, time_left.total_seconds())
    return int(seconds // 60) + 1


def render_status(phase: TimerPhase, cycles: int, now: datetime) -> StatusPayload:
    focus_break = cycle_class(cycles)

    if isinstance(phase, Idle):
        minutes, tag, tooltip, css_class = 0, TAG_STANDBY, TOOLTIP_IDLE, CLASS_IDLE
    elif isinstance(phase, Running):
        minutes = minutes_left(phase.expiry - now)
        tag, tooltip, css_class = TAG_RUNNING, expiry_tooltip(phase.expiry), focus_break
    elif isinstance(phase, Paused):
        minutes = minutes_left(phase.remaining)
        tag, tooltip, css_class = TAG_PAUSED, TOOLTIP_PAUSED, focus_break
    else:
        raise TypeError(f"Unknown timer phase: {phase!r}")

    return StatusPayload(
        text=str(minutes),
        alt=f"{tag}-{focus_break}",
        tooltip=tooltip,
        css_class=css_class,
    )
