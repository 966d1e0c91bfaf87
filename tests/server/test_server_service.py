import io
import json
import socket
import tempfile
import threading
import time
import unittest
from pathlib import Path

from pomodoro import PomodoroTimer, Running
from server import (
    NoTimerExisting,
    OutOfRange,
    ServerConfig,
    ServerError,
    ServiceState,
    TimerClient,
    TimerServer,
    follow_updates,
)
from server.config import connect


class TimerServerIntegrationTests(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        root = Path(self._temp_dir.name)
        self.config = ServerConfig(
            updates_socket=str(root / "updates.sock"),
            commands_socket=str(root / "commands.sock"),
            tick_interval_seconds=0.05,
            subscriber_write_timeout_seconds=0.5,
        )
        self.server = TimerServer(self.config, ServiceState(PomodoroTimer()))
        self.server.start()
        self._serve_thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self._serve_thread.start()
        self.client = TimerClient(self.config.commands_socket, timeout_seconds=2.0)

    def tearDown(self) -> None:
        self.server.stop()
        self._serve_thread.join(timeout=2.0)
        self._temp_dir.cleanup()

    def _subscribe(self):
        conn = connect(self.config.updates_socket, timeout_seconds=2.0)
        conn.shutdown(socket.SHUT_WR)
        self.addCleanup(conn.close)
        reader = conn.makefile("rb")
        self.addCleanup(reader.close)
        return reader

    def _wait_for(self, reader, predicate, timeout_seconds: float = 2.0) -> dict:
        deadline = time.monotonic() + timeout_seconds
        while time.monotonic() < deadline:
            line = reader.readline()
            if not line:
                break
            payload = json.loads(line)
            if predicate(payload):
                return payload
        self.fail("Expected status line was not received")

    def test_subscriber_receives_state_on_connect(self) -> None:
        reader = self._subscribe()

        payload = json.loads(reader.readline())

        self.assertEqual({"text", "alt", "tooltip", "class"}, set(payload))
        self.assertEqual("standby-focus", payload["alt"])

    def test_command_round_trip_updates_subscribers(self) -> None:
        reader = self._subscribe()

        self.client.start()
        running = self._wait_for(reader, lambda p: p["alt"] == "running-focus")
        self.assertEqual("25", running["text"])

        self.client.togglepause()
        self._wait_for(reader, lambda p: p["alt"] == "paused-focus")

        self.client.skip()
        idle = self._wait_for(reader, lambda p: p["alt"] == "standby-break")
        self.assertEqual("idle", idle["class"])
        self.assertEqual(1, self.server.state.snapshot().cycles)

    def test_domain_error_is_raised_on_client(self) -> None:
        with self.assertRaises(NoTimerExisting) as ctx:
            self.client.increase(60)
        self.assertEqual("no timer exists right now", str(ctx.exception))

    def test_malformed_request_closes_connection_and_server_keeps_serving(self) -> None:
        with connect(self.config.commands_socket, timeout_seconds=2.0) as conn:
            conn.sendall(b'{"verb": "explode"}\n')
            self.assertEqual(b"", conn.recv(1024))

        self.client.start()
        self.client.cancel()

    def test_oversized_adjustment_is_refused_and_server_keeps_serving(self) -> None:
        self.client.start()
        with connect(self.config.commands_socket, timeout_seconds=2.0) as conn:
            conn.sendall(b'{"verb": "increase", "args": {"seconds": 1000000000000}}\n')
            self.assertEqual(b"", conn.recv(1024))

        self.assertTrue(self._serve_thread.is_alive())
        self.client.cancel()

    def test_adjustment_past_datetime_range_reports_out_of_range(self) -> None:
        self.client.start()
        with self.assertRaises(OutOfRange):
            for _ in range(100):
                self.client.increase(2**32 - 1)

        self.assertTrue(self._serve_thread.is_alive())
        self.client.togglepause()
        self.client.cancel()

    def test_follow_updates_copies_lines_until_disconnect(self) -> None:
        output = io.StringIO()
        hook = threading.Thread(
            target=follow_updates,
            args=(output, self.config.updates_socket),
            daemon=True,
        )
        hook.start()

        deadline = time.monotonic() + 2.0
        while not output.getvalue() and time.monotonic() < deadline:
            time.sleep(0.01)
        self.server.stop()
        hook.join(timeout=2.0)

        self.assertFalse(hook.is_alive())
        first_line = output.getvalue().splitlines()[0]
        self.assertEqual("standby-focus", json.loads(first_line)["alt"])

    def test_stop_removes_socket_files(self) -> None:
        self.server.stop()
        self._serve_thread.join(timeout=2.0)

        self.assertFalse(Path(self.config.updates_socket).exists())
        self.assertFalse(Path(self.config.commands_socket).exists())
        self.assertFalse(self.server.is_running)


class _HeldBroadcastState(ServiceState):
    """Blocks broadcasts until released so reply ordering can be observed."""

    def __init__(self, timer: PomodoroTimer):
        super().__init__(timer)
        self.release = threading.Event()
        self.broadcasts = 0

    def update(self) -> None:
        self.release.wait(timeout=5.0)
        super().update()
        self.broadcasts += 1


class TimerServerReplyOrderTests(unittest.TestCase):
    def test_reply_is_written_before_broadcast(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            config = ServerConfig(
                updates_socket=str(root / "updates.sock"),
                commands_socket=str(root / "commands.sock"),
                tick_interval_seconds=60.0,
            )
            state = _HeldBroadcastState(PomodoroTimer())
            server = TimerServer(config, state)
            server.start()
            serve_thread = threading.Thread(target=server.serve_forever, daemon=True)
            serve_thread.start()
            try:
                TimerClient(config.commands_socket, timeout_seconds=2.0).start()
                self.assertEqual(0, state.broadcasts)
            finally:
                state.release.set()
                server.stop()
                serve_thread.join(timeout=2.0)

            self.assertEqual(1, state.broadcasts)
            self.assertIsInstance(state.snapshot().phase, Running)


class TimerServerLifecycleTests(unittest.TestCase):
    def test_serve_forever_requires_start(self) -> None:
        server = TimerServer(ServerConfig(), ServiceState(PomodoroTimer()))
        with self.assertRaises(ServerError):
            server.serve_forever()

    def test_bind_failure_raises_server_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            missing = Path(temp_dir) / "missing" / "dir"
            config = ServerConfig(
                updates_socket=str(missing / "updates.sock"),
                commands_socket=str(missing / "commands.sock"),
            )
            server = TimerServer(config, ServiceState(PomodoroTimer()))
            with self.assertRaises(ServerError):
                server.start()
            self.assertFalse(server.is_running)


if __name__ == "__main__":
    unittest.main()
