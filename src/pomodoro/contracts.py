"""Protocols for the side effects the timer triggers."""

from __future__ import annotations

from typing import Protocol


class Notifier(Protocol):
    """Best-effort desktop notification sink; must never block or raise."""
    def notify(self, summary: str) -> None:
        ...


class CommandRunner(Protocol):
    """Fire-and-forget launcher for completion commands; must never raise."""
    def run(self, command: str) -> None:
        ...


class NullNotifier:
    def notify(self, summary: str) -> None:
        del summary


class NullCommandRunner:
    def run(self, command: str) -> None:
        del command
