import argparse
import logging
import signal
import sys
from typing import Optional, Sequence

from app_config import AppConfig, AppConfigurationError, load_app_config
from contracts.rpc_protocol import MAX_ADJUST_SECONDS
from pomodoro import CycleSchedule, NullNotifier, PomodoroTimer
from runtime import NotifySendNotifier, ProtocolError, ShellCommandRunner
from server import (
    ServerConfig,
    ServerConfigurationError,
    ServerError,
    ServiceState,
    TimerClient,
    TimerCommandError,
    TimerServer,
    follow_updates,
)


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    return logging.getLogger("waybar_timer")


def setup_signal_handlers(server: TimerServer, logger: logging.Logger) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        del frame
        logger.info("Signal %s received, stopping.", signal.Signals(signum).name)
        server.request_stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def build_server(app_config: AppConfig) -> TimerServer:
    """Wire the timer, its side effects, and the socket server from config."""
    server_config = ServerConfig.from_settings(app_config.server)

    if app_config.notifications.enabled:
        notifier = NotifySendNotifier(
            app_name=app_config.notifications.app_name,
            urgency=app_config.notifications.urgency,
            executable=app_config.notifications.executable,
            logger=logging.getLogger("notifications"),
        )
    else:
        notifier = NullNotifier()

    timer = PomodoroTimer(
        schedule=CycleSchedule(
            focus_minutes=app_config.timer.focus_minutes,
            short_break_minutes=app_config.timer.short_break_minutes,
            long_break_minutes=app_config.timer.long_break_minutes,
        ),
        notifier=notifier,
        command_runner=ShellCommandRunner(
            shell=app_config.completion.shell,
            logger=logging.getLogger("completion"),
        ),
        start_when_active=app_config.timer.start_when_active,
        idle_cancel=app_config.timer.idle_cancel,
        logger=logging.getLogger("pomodoro"),
    )
    state = ServiceState(
        timer,
        write_timeout_seconds=server_config.subscriber_write_timeout_seconds,
        logger=logging.getLogger("timer_server"),
    )
    return TimerServer(server_config, state, logger=logging.getLogger("timer_server"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="waybar-timer",
        description="Pomodoro timer service and client for waybar.",
    )
    parser.add_argument("--config", help="Path to config.toml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("serve", help="Serve the timer API (run once at compositor startup)")
    commands.add_parser("hook", help="Stream timer status lines (run by waybar)")

    new = commands.add_parser("new", help="Start a new timer")
    new.add_argument("shell_command", nargs="?", help="Shell command to run when the timer expires")

    for name, help_text in (
        ("increase", "Increase the current timer"),
        ("decrease", "Decrease the current timer"),
    ):
        adjust = commands.add_parser(name, help=help_text)
        adjust.add_argument("seconds", type=_non_negative_int)

    commands.add_parser("togglepause", help="Pause or resume the current timer")
    commands.add_parser("skip", help="Let the current timer expire now")
    commands.add_parser("cancel", help="Cancel the current timer")
    return parser


def _non_negative_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from error
    if value < 0:
        raise argparse.ArgumentTypeError("seconds must not be negative")
    if value > MAX_ADJUST_SECONDS:
        raise argparse.ArgumentTypeError(f"seconds must not exceed {MAX_ADJUST_SECONDS}")
    return value


def run_serve(app_config: AppConfig, logger: logging.Logger) -> int:
    try:
        server = build_server(app_config)
    except (ServerConfigurationError, ValueError) as error:
        logger.error("Configuration error: %s", error)
        return 1

    setup_signal_handlers(server, logger)
    try:
        server.run()
    except ServerError as error:
        logger.error("%s", error)
        return 1
    return 0


def run_client_command(args: argparse.Namespace, app_config: AppConfig) -> int:
    client = TimerClient(app_config.server.commands_socket)
    command = args.command
    try:
        if command == "new":
            client.start(args.shell_command)
        elif command == "increase":
            client.increase(args.seconds)
        elif command == "decrease":
            client.decrease(args.seconds)
        elif command == "togglepause":
            client.togglepause()
        elif command == "skip":
            client.skip()
        elif command == "cancel":
            client.cancel()
        else:
            raise ValueError(f"Unsupported command: {command}")
    except TimerCommandError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    except (OSError, ProtocolError) as error:
        print(f"Error: could not reach timer service: {error}", file=sys.stderr)
        return 1
    return 0


def run_hook(app_config: AppConfig) -> int:
    try:
        follow_updates(sys.stdout, app_config.server.updates_socket)
    except OSError as error:
        print(f"Error: could not reach timer service: {error}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the timer service or one of its client commands."""
    args = build_parser().parse_args(argv)
    logger = setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        app_config = load_app_config(args.config)
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    if args.command == "serve":
        if app_config.source_file:
            logger.info("Loaded runtime config: %s", app_config.source_file)
        return run_serve(app_config, logger)
    if args.command == "hook":
        return run_hook(app_config)
    return run_client_command(args, app_config)


if __name__ == "__main__":
    raise SystemExit(main())
