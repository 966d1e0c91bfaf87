import datetime as dt
import unittest

from pomodoro import CycleSchedule, Idle, Paused, PomodoroTimer, Running, is_active

_START = dt.datetime(2026, 2, 21, 10, 0, tzinfo=dt.timezone.utc)


class _Clock:
    def __init__(self, now: dt.datetime = _START):
        self.now = now

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += dt.timedelta(**kwargs)


class _RecordingNotifier:
    def __init__(self):
        self.summaries: list[str] = []

    def notify(self, summary: str) -> None:
        self.summaries.append(summary)


class _RecordingRunner:
    def __init__(self):
        self.commands: list[str] = []

    def run(self, command: str) -> None:
        self.commands.append(command)


def _build_timer(**kwargs):
    clock = _Clock()
    notifier = _RecordingNotifier()
    runner = _RecordingRunner()
    timer = PomodoroTimer(now_fn=clock, notifier=notifier, command_runner=runner, **kwargs)
    return timer, clock, notifier, runner


class PomodoroTimerStartTests(unittest.TestCase):
    def test_start_from_idle_runs_for_focus_duration(self) -> None:
        timer, _, notifier, _ = _build_timer()

        result = timer.start()

        self.assertTrue(result.accepted)
        self.assertEqual("started", result.reason)
        self.assertIsInstance(timer.phase, Running)
        expected = _START + dt.timedelta(minutes=25) - dt.timedelta(milliseconds=1)
        self.assertEqual(expected, timer.phase.expiry)
        self.assertIsNone(timer.phase.command)
        self.assertEqual(["Timer expires at 10:24"], notifier.summaries)

    def test_start_renders_full_minutes_immediately(self) -> None:
        timer, _, _, _ = _build_timer()
        timer.start()

        payload = timer.tick_and_render()

        self.assertEqual("25", payload.text)
        self.assertEqual("running-focus", payload.alt)
        self.assertEqual("focus", payload.css_class)

    def test_start_carries_completion_command(self) -> None:
        timer, _, _, _ = _build_timer()
        timer.start("notify-send done")
        self.assertEqual("notify-send done", timer.phase.command)

    def test_schedule_alternates_focus_and_breaks(self) -> None:
        schedule = CycleSchedule(focus_minutes=25, short_break_minutes=5, long_break_minutes=15)
        minutes = [schedule.minutes_for(cycles) for cycles in range(9)]
        self.assertEqual([25, 5, 25, 5, 25, 5, 25, 15, 25], minutes)

    def test_default_schedule_uses_long_focus_length_for_long_break(self) -> None:
        self.assertEqual(25, CycleSchedule().minutes_for(7))

    def test_schedule_rejects_non_positive_minutes(self) -> None:
        with self.assertRaises(ValueError):
            CycleSchedule(short_break_minutes=0)

    def test_start_while_running_toggles_pause_by_default(self) -> None:
        timer, clock, _, _ = _build_timer()
        timer.start()
        clock.advance(minutes=5)

        result = timer.start()

        self.assertTrue(result.accepted)
        self.assertEqual("paused", result.reason)
        self.assertIsInstance(timer.phase, Paused)

    def test_start_while_active_rejected_with_strict_policy(self) -> None:
        timer, _, _, _ = _build_timer(start_when_active="reject")
        timer.start()
        before = timer.phase

        result = timer.start()

        self.assertFalse(result.accepted)
        self.assertEqual("TimerAlreadyExisting", result.reason)
        self.assertEqual(before, timer.phase)

    def test_unknown_policies_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            PomodoroTimer(start_when_active="restart")
        with self.assertRaises(ValueError):
            PomodoroTimer(idle_cancel="keep")


class PomodoroTimerIdleFailureTests(unittest.TestCase):
    def test_operations_on_idle_fail_without_mutation(self) -> None:
        timer, _, notifier, _ = _build_timer()

        for result in (timer.increase(60), timer.skip(), timer.togglepause()):
            self.assertFalse(result.accepted)
            self.assertEqual("NoTimerExisting", result.reason)
            self.assertIsInstance(result.snapshot.phase, Idle)
            self.assertEqual(0, result.snapshot.cycles)

        self.assertEqual([], notifier.summaries)


class PomodoroTimerCancelTests(unittest.TestCase):
    def test_cancel_active_timer_notifies_and_keeps_cycles(self) -> None:
        timer, _, notifier, _ = _build_timer()
        timer.start()

        result = timer.cancel()

        self.assertTrue(result.accepted)
        self.assertIsInstance(timer.phase, Idle)
        self.assertEqual(0, timer.cycles)
        self.assertEqual("Timer canceled", notifier.summaries[-1])

    def test_idle_cancel_resets_cycles_by_default(self) -> None:
        timer, clock, notifier, _ = _build_timer()
        timer.start()
        clock.advance(minutes=25)
        timer.tick_and_render()
        self.assertEqual(1, timer.cycles)
        notified = len(notifier.summaries)

        result = timer.cancel()

        self.assertTrue(result.accepted)
        self.assertEqual("cycle_reset", result.reason)
        self.assertIsInstance(timer.phase, Idle)
        self.assertEqual(0, timer.cycles)
        self.assertEqual(notified, len(notifier.summaries))

    def test_idle_cancel_advances_cycles_with_advance_policy(self) -> None:
        timer, _, _, _ = _build_timer(idle_cancel="advance")

        timer.cancel()
        timer.cancel()

        self.assertIsInstance(timer.phase, Idle)
        self.assertEqual(2, timer.cycles)
        self.assertEqual("standby-focus", timer.tick_and_render().alt)


class PomodoroTimerPauseTests(unittest.TestCase):
    def test_pause_captures_remaining_and_carries_command(self) -> None:
        timer, clock, notifier, _ = _build_timer()
        timer.start("echo done")
        clock.advance(minutes=10)

        result = timer.togglepause()

        self.assertEqual("paused", result.reason)
        self.assertIsInstance(timer.phase, Paused)
        self.assertEqual(
            dt.timedelta(minutes=15) - dt.timedelta(milliseconds=1),
            timer.phase.remaining,
        )
        self.assertEqual("echo done", timer.phase.command)
        self.assertEqual("Timer paused", notifier.summaries[-1])

    def test_double_toggle_restores_expiry(self) -> None:
        timer, _, _, _ = _build_timer()
        timer.start("echo done")
        expiry = timer.phase.expiry

        timer.togglepause()
        result = timer.togglepause()

        self.assertEqual("resumed", result.reason)
        self.assertEqual(Running(expiry=expiry, command="echo done"), timer.phase)

    def test_resume_shifts_expiry_by_paused_time(self) -> None:
        timer, clock, notifier, _ = _build_timer()
        timer.start()
        clock.advance(minutes=5)
        timer.togglepause()
        clock.advance(minutes=30)

        timer.togglepause()

        self.assertIsInstance(timer.phase, Running)
        self.assertEqual(
            clock.now + dt.timedelta(minutes=20) - dt.timedelta(milliseconds=1),
            timer.phase.expiry,
        )
        self.assertTrue(notifier.summaries[-1].startswith("Timer expires at "))

    def test_paused_timer_never_expires(self) -> None:
        timer, clock, _, _ = _build_timer()
        timer.start()
        timer.togglepause()
        clock.advance(hours=2)

        payload = timer.tick_and_render()

        self.assertIsInstance(timer.phase, Paused)
        self.assertEqual("paused-focus", payload.alt)
        self.assertEqual("25", payload.text)


class PomodoroTimerIncreaseTests(unittest.TestCase):
    def test_increase_running_shifts_expiry_and_notifies(self) -> None:
        timer, _, notifier, _ = _build_timer()
        timer.start()
        expiry = timer.phase.expiry

        result = timer.increase(300)

        self.assertTrue(result.accepted)
        self.assertEqual(expiry + dt.timedelta(minutes=5), timer.phase.expiry)
        self.assertEqual("Timer expires at 10:29", notifier.summaries[-1])

    def test_increase_paused_shifts_remaining_silently(self) -> None:
        timer, _, notifier, _ = _build_timer()
        timer.start("cmd")
        timer.togglepause()
        notified = len(notifier.summaries)

        timer.increase(-60)

        self.assertEqual(
            dt.timedelta(minutes=24) - dt.timedelta(milliseconds=1),
            timer.phase.remaining,
        )
        self.assertEqual("cmd", timer.phase.command)
        self.assertEqual(notified, len(notifier.summaries))

    def test_decrease_past_zero_expires_on_next_tick(self) -> None:
        timer, clock, _, runner = _build_timer()
        timer.start("echo done")
        clock.advance(minutes=15)

        timer.increase(-600)
        payload = timer.tick_and_render()

        self.assertIsInstance(timer.phase, Idle)
        self.assertEqual(1, timer.cycles)
        self.assertEqual(["echo done"], runner.commands)
        self.assertEqual("0", payload.text)
        self.assertEqual("standby-break", payload.alt)

    def test_negative_paused_remaining_expires_after_resume(self) -> None:
        timer, _, _, _ = _build_timer()
        timer.start()
        timer.togglepause()
        timer.increase(-3600)

        self.assertEqual("1", timer.tick_and_render().text)
        timer.togglepause()
        timer.tick_and_render()

        self.assertIsInstance(timer.phase, Idle)
        self.assertEqual(1, timer.cycles)

    def test_increase_beyond_datetime_range_is_rejected(self) -> None:
        timer, _, notifier, _ = _build_timer()
        timer.start("echo done")
        started = timer.phase

        for _ in range(100):
            previous = timer.phase
            result = timer.increase(2**32 - 1)
            if not result.accepted:
                break

        self.assertEqual("OutOfRange", result.reason)
        self.assertEqual(previous, timer.phase)
        self.assertEqual(previous, result.snapshot.phase)
        self.assertGreater(timer.phase.expiry, started.expiry)

        notified = len(notifier.summaries)
        self.assertEqual("OutOfRange", timer.increase(10**15).reason)
        self.assertEqual(previous, timer.phase)
        self.assertEqual(notified, len(notifier.summaries))

    def test_resume_beyond_datetime_range_is_rejected(self) -> None:
        timer, _, notifier, _ = _build_timer()
        timer.start()
        timer.togglepause()
        for _ in range(100):
            self.assertTrue(timer.increase(2**32 - 1).accepted)
        paused = timer.phase
        notified = len(notifier.summaries)

        result = timer.togglepause()

        self.assertFalse(result.accepted)
        self.assertEqual("OutOfRange", result.reason)
        self.assertEqual(paused, timer.phase)
        self.assertEqual(notified, len(notifier.summaries))
        self.assertEqual("paused-focus", timer.tick_and_render().alt)

        self.assertTrue(timer.cancel().accepted)
        self.assertIsInstance(timer.phase, Idle)


class PomodoroTimerSkipTests(unittest.TestCase):
    def test_skip_running_expires_on_next_tick(self) -> None:
        timer, _, _, runner = _build_timer()
        timer.start()

        result = timer.skip()
        self.assertEqual("skipped", result.reason)
        self.assertEqual(_START, timer.phase.expiry)

        timer.tick_and_render()
        self.assertIsInstance(timer.phase, Idle)
        self.assertEqual(1, timer.cycles)
        self.assertEqual([], runner.commands)

    def test_skip_paused_resumes_with_immediate_expiry(self) -> None:
        timer, clock, _, runner = _build_timer()
        timer.start("echo skipped")
        clock.advance(minutes=20)
        timer.togglepause()
        clock.advance(minutes=3)

        timer.skip()

        self.assertEqual(Running(expiry=clock.now, command="echo skipped"), timer.phase)
        timer.tick_and_render()
        self.assertIsInstance(timer.phase, Idle)
        self.assertEqual(1, timer.cycles)
        self.assertEqual(["echo skipped"], runner.commands)


class PomodoroTimerCycleTests(unittest.TestCase):
    def test_second_cycle_is_short_break(self) -> None:
        timer, clock, _, _ = _build_timer()
        timer.start()
        clock.advance(minutes=25)
        timer.tick_and_render()

        timer.start()
        payload = timer.tick_and_render()

        self.assertEqual("5", payload.text)
        self.assertEqual("running-break", payload.alt)
        self.assertEqual("break", payload.css_class)

    def test_expiry_is_exclusive_before_deadline(self) -> None:
        timer, clock, _, _ = _build_timer()
        timer.start()
        clock.advance(minutes=24, seconds=59)

        payload = timer.tick_and_render()

        self.assertIsInstance(timer.phase, Running)
        self.assertEqual("1", payload.text)

    def test_is_active_covers_every_phase(self) -> None:
        timer, _, _, _ = _build_timer()
        self.assertFalse(is_active(timer.phase))
        timer.start()
        self.assertTrue(is_active(timer.phase))
        timer.togglepause()
        self.assertTrue(is_active(timer.phase))
        with self.assertRaises(TypeError):
            is_active("running")  # type: ignore[arg-type]

    def test_every_step_leaves_exactly_one_phase(self) -> None:
        timer, clock, _, _ = _build_timer()
        steps = [
            timer.start,
            timer.togglepause,
            lambda: timer.increase(-30),
            timer.skip,
            timer.tick_and_render,
            timer.cancel,
            timer.start,
            lambda: timer.increase(90),
            timer.cancel,
            timer.cancel,
        ]
        for step in steps:
            step()
            clock.advance(seconds=10)
            matches = [
                isinstance(timer.phase, kind) for kind in (Idle, Running, Paused)
            ]
            self.assertEqual(1, matches.count(True))


if __name__ == "__main__":
    unittest.main()
