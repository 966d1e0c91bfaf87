"""Desktop notifications delivered through `notify-send`."""

from __future__ import annotations

import logging
import subprocess
from typing import Optional

from .process import PopenFactory, spawn_detached

DEFAULT_APP_NAME = "Waybar Timer"
DEFAULT_URGENCY = "low"
DEFAULT_EXECUTABLE = "notify-send"
URGENCY_LEVELS: frozenset[str] = frozenset({"low", "normal", "critical"})

# Lets notification daemons replace the previous timer bubble in place.
_REPLACE_HINT = "string:x-canonical-private-synchronous:waybar-timer"


class NotifySendNotifier:
    """Fire-and-forget notifier; failures are logged and swallowed."""
    def __init__(
        self,
        *,
        app_name: str = DEFAULT_APP_NAME,
        urgency: str = DEFAULT_URGENCY,
        executable: str = DEFAULT_EXECUTABLE,
        logger: Optional[logging.Logger] = None,
        popen: PopenFactory = subprocess.Popen,
    ):
        if urgency not in URGENCY_LEVELS:
            allowed = ", ".join(sorted(URGENCY_LEVELS))
            raise ValueError(f"urgency must be one of: {allowed}")
        self._app_name = app_name
        self._urgency = urgency
        self._executable = executable
        self._logger = logger or logging.getLogger("notifications")
        self._popen = popen

    def notify(self, summary: str) -> None:
        self._logger.debug("Notification: %s", summary)
        spawn_detached(
            [
                self._executable,
                "--app-name",
                self._app_name,
                "--urgency",
                self._urgency,
                "--hint",
                _REPLACE_HINT,
                summary,
            ],
            label="notify-send",
            logger=self._logger,
            popen=self._popen,
        )
