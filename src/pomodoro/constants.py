"""Schedule, policy, action, and reason constants used by the timer state machine."""

from __future__ import annotations

from datetime import timedelta

from contracts.rpc_protocol import (
    ERROR_NO_TIMER_EXISTING,
    ERROR_OUT_OF_RANGE,
    ERROR_TIMER_ALREADY_EXISTING,
)

DEFAULT_FOCUS_MINUTES = 25
DEFAULT_SHORT_BREAK_MINUTES = 5
DEFAULT_LONG_BREAK_MINUTES = 25

# Position of a cycle inside one full round of four focus sessions.
CYCLES_PER_ROUND = 8
SHORT_BREAK_POSITIONS: frozenset[int] = frozenset({1, 3, 5})
LONG_BREAK_POSITION = 7

# Subtracted from a fresh expiry so the first rendered minute count is exact.
START_BACKOFF = timedelta(milliseconds=1)

START_WHEN_ACTIVE_TOGGLE = "toggle"
START_WHEN_ACTIVE_REJECT = "reject"
START_WHEN_ACTIVE_POLICIES: frozenset[str] = frozenset(
    {START_WHEN_ACTIVE_TOGGLE, START_WHEN_ACTIVE_REJECT}
)

IDLE_CANCEL_RESET = "reset"
IDLE_CANCEL_ADVANCE = "advance"
IDLE_CANCEL_POLICIES: frozenset[str] = frozenset({IDLE_CANCEL_RESET, IDLE_CANCEL_ADVANCE})

ACTION_CANCEL = "cancel"
ACTION_START = "start"
ACTION_INCREASE = "increase"
ACTION_TOGGLEPAUSE = "togglepause"
ACTION_SKIP = "skip"

REASON_CANCELED = "canceled"
REASON_CYCLE_RESET = "cycle_reset"
REASON_CYCLE_ADVANCED = "cycle_advanced"
REASON_STARTED = "started"
REASON_INCREASED = "increased"
REASON_PAUSED = "paused"
REASON_RESUMED = "resumed"
REASON_SKIPPED = "skipped"
REASON_NO_TIMER_EXISTING = ERROR_NO_TIMER_EXISTING
REASON_TIMER_ALREADY_EXISTING = ERROR_TIMER_ALREADY_EXISTING
REASON_OUT_OF_RANGE = ERROR_OUT_OF_RANGE

NOTIFICATION_CANCELED = "Timer canceled"
NOTIFICATION_PAUSED = "Timer paused"
