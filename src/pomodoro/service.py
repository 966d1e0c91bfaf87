"""In-memory pomodoro timer state machine with injected clock and side effects."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Literal, Optional

from .constants import (
    ACTION_CANCEL,
    ACTION_INCREASE,
    ACTION_SKIP,
    ACTION_START,
    ACTION_TOGGLEPAUSE,
    CYCLES_PER_ROUND,
    DEFAULT_FOCUS_MINUTES,
    DEFAULT_LONG_BREAK_MINUTES,
    DEFAULT_SHORT_BREAK_MINUTES,
    IDLE_CANCEL_POLICIES,
    IDLE_CANCEL_RESET,
    LONG_BREAK_POSITION,
    NOTIFICATION_CANCELED,
    NOTIFICATION_PAUSED,
    REASON_CANCELED,
    REASON_CYCLE_ADVANCED,
    REASON_CYCLE_RESET,
    REASON_INCREASED,
    REASON_NO_TIMER_EXISTING,
    REASON_OUT_OF_RANGE,
    REASON_PAUSED,
    REASON_RESUMED,
    REASON_SKIPPED,
    REASON_STARTED,
    REASON_TIMER_ALREADY_EXISTING,
    SHORT_BREAK_POSITIONS,
    START_BACKOFF,
    START_WHEN_ACTIVE_POLICIES,
    START_WHEN_ACTIVE_TOGGLE,
)
from .contracts import CommandRunner, Notifier, NullCommandRunner, NullNotifier
from .phases import IDLE, Idle, Paused, Running, TimerPhase
from .render import StatusPayload, expiry_tooltip, render_status

TimerAction = Literal["cancel", "start", "increase", "togglepause", "skip"]


def local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class CycleSchedule:
    """Durations in minutes for focus sessions and short/long breaks."""
    focus_minutes: int = DEFAULT_FOCUS_MINUTES
    short_break_minutes: int = DEFAULT_SHORT_BREAK_MINUTES
    long_break_minutes: int = DEFAULT_LONG_BREAK_MINUTES

    def __post_init__(self) -> None:
        for name in ("focus_minutes", "short_break_minutes", "long_break_minutes"):
            if int(getattr(self, name)) <= 0:
                raise ValueError(f"{name} must be greater than zero")

    def minutes_for(self, cycles: int) -> int:
        position = cycles % CYCLES_PER_ROUND
        if position in SHORT_BREAK_POSITIONS:
            return self.short_break_minutes
        if position == LONG_BREAK_POSITION:
            return self.long_break_minutes
        return self.focus_minutes


@dataclass(frozen=True)
class TimerSnapshot:
    """Immutable view of the timer exposed to the server and tests."""
    phase: TimerPhase
    cycles: int


@dataclass(frozen=True)
class TimerActionResult:
    """Result envelope returned after applying a timer action."""
    action: TimerAction
    accepted: bool
    reason: str
    snapshot: TimerSnapshot


class PomodoroTimer:
    """Single pomodoro timer alternating focus and break cycles.

    Not thread-safe on its own: the owning service serializes every call.
    """

    def __init__(
        self,
        *,
        schedule: Optional[CycleSchedule] = None,
        now_fn: Callable[[], datetime] = local_now,
        notifier: Optional[Notifier] = None,
        command_runner: Optional[CommandRunner] = None,
        start_when_active: str = START_WHEN_ACTIVE_TOGGLE,
        idle_cancel: str = IDLE_CANCEL_RESET,
        logger: Optional[logging.Logger] = None,
    ):
        if start_when_active not in START_WHEN_ACTIVE_POLICIES:
            raise ValueError(f"Unsupported start_when_active policy: {start_when_active}")
        if idle_cancel not in IDLE_CANCEL_POLICIES:
            raise ValueError(f"Unsupported idle_cancel policy: {idle_cancel}")

        self._schedule = schedule or CycleSchedule()
        self._now = now_fn
        self._notifier = notifier or NullNotifier()
        self._command_runner = command_runner or NullCommandRunner()
        self._start_when_active = start_when_active
        self._idle_cancel = idle_cancel
        self._logger = logger or logging.getLogger("pomodoro")

        self._phase: TimerPhase = IDLE
        self._cycles = 0

    @property
    def phase(self) -> TimerPhase:
        return self._phase

    @property
    def cycles(self) -> int:
        return self._cycles

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(phase=self._phase, cycles=self._cycles)

    def cancel(self) -> TimerActionResult:
        phase = self._phase
        if isinstance(phase, Idle):
            if self._idle_cancel == IDLE_CANCEL_RESET:
                self._cycles = 0
                reason = REASON_CYCLE_RESET
            else:
                self._cycles += 1
                reason = REASON_CYCLE_ADVANCED
            self._logger.info("Idle cancel: cycles=%d", self._cycles)
            return self._result(ACTION_CANCEL, True, reason)
        if not isinstance(phase, (Running, Paused)):
            raise TypeError(f"Unknown timer phase: {phase!r}")

        self._phase = IDLE
        self._notifier.notify(NOTIFICATION_CANCELED)
        self._logger.info("Timer canceled: cycles=%d", self._cycles)
        return self._result(ACTION_CANCEL, True, REASON_CANCELED)

    def start(self, command: Optional[str] = None) -> TimerActionResult:
        phase = self._phase
        if isinstance(phase, (Running, Paused)):
            if self._start_when_active == START_WHEN_ACTIVE_TOGGLE:
                return self._toggle(ACTION_START)
            return self._result(ACTION_START, False, REASON_TIMER_ALREADY_EXISTING)
        if not isinstance(phase, Idle):
            raise TypeError(f"Unknown timer phase: {phase!r}")

        minutes = self._schedule.minutes_for(self._cycles)
        expiry = self._now() + timedelta(minutes=minutes) - START_BACKOFF
        self._phase = Running(expiry=expiry, command=command)
        self._notifier.notify(expiry_tooltip(expiry))
        self._logger.info(
            "Timer started: cycles=%d minutes=%d command=%s",
            self._cycles,
            minutes,
            "yes" if command else "no",
        )
        return self._result(ACTION_START, True, REASON_STARTED)

    def increase(self, seconds: int) -> TimerActionResult:
        phase = self._phase
        if isinstance(phase, Idle):
            return self._result(ACTION_INCREASE, False, REASON_NO_TIMER_EXISTING)
        if not isinstance(phase, (Running, Paused)):
            raise TypeError(f"Unknown timer phase: {phase!r}")

        try:
            delta = timedelta(seconds=int(seconds))
            if isinstance(phase, Running):
                shifted: TimerPhase = Running(expiry=phase.expiry + delta, command=phase.command)
            else:
                shifted = Paused(remaining=phase.remaining + delta, command=phase.command)
        except OverflowError:
            self._logger.info("Rejected adjustment of %+ds: out of range", int(seconds))
            return self._result(ACTION_INCREASE, False, REASON_OUT_OF_RANGE)

        self._phase = shifted
        if isinstance(shifted, Running):
            self._notifier.notify(expiry_tooltip(shifted.expiry))

        self._logger.info("Timer adjusted by %+ds", int(seconds))
        return self._result(ACTION_INCREASE, True, REASON_INCREASED)

    def skip(self) -> TimerActionResult:
        phase = self._phase
        if isinstance(phase, Running):
            self._phase = Running(expiry=self._now(), command=phase.command)
        elif isinstance(phase, Paused):
            self._phase = Paused(remaining=timedelta(0), command=phase.command)
            self._toggle(ACTION_SKIP)
        elif isinstance(phase, Idle):
            return self._result(ACTION_SKIP, False, REASON_NO_TIMER_EXISTING)
        else:
            raise TypeError(f"Unknown timer phase: {phase!r}")

        self._logger.info("Timer skipped")
        return self._result(ACTION_SKIP, True, REASON_SKIPPED)

    def togglepause(self) -> TimerActionResult:
        return self._toggle(ACTION_TOGGLEPAUSE)

    def tick_and_render(self) -> StatusPayload:
        """Expire a due timer, then render the current state."""
        now = self._now()
        phase = self._phase
        if isinstance(phase, Running) and phase.expiry <= now:
            if phase.command:
                self._command_runner.run(phase.command)
            self._cycles += 1
            self._phase = IDLE
            self._logger.info("Timer expired: cycles=%d", self._cycles)
        return render_status(self._phase, self._cycles, now)

    def _toggle(self, action: TimerAction) -> TimerActionResult:
        phase = self._phase
        if isinstance(phase, Running):
            remaining = phase.expiry - self._now()
            self._phase = Paused(remaining=remaining, command=phase.command)
            self._notifier.notify(NOTIFICATION_PAUSED)
            self._logger.info("Timer paused: remaining=%ss", int(remaining.total_seconds()))
            return self._result(action, True, REASON_PAUSED)
        if isinstance(phase, Paused):
            try:
                expiry = self._now() + phase.remaining
            except OverflowError:
                self._logger.info("Rejected resume: expiry out of range")
                return self._result(action, False, REASON_OUT_OF_RANGE)
            self._phase = Running(expiry=expiry, command=phase.command)
            self._notifier.notify(expiry_tooltip(expiry))
            self._logger.info("Timer resumed: expiry=%s", expiry.isoformat())
            return self._result(action, True, REASON_RESUMED)
        if isinstance(phase, Idle):
            return self._result(action, False, REASON_NO_TIMER_EXISTING)
        raise TypeError(f"Unknown timer phase: {phase!r}")

    def _result(self, action: TimerAction, accepted: bool, reason: str) -> TimerActionResult:
        return TimerActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self.snapshot(),
        )
