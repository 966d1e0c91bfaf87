"""Runs the user supplied completion command when a timer expires."""

from __future__ import annotations

import logging
import subprocess
from typing import Optional

from .process import PopenFactory, spawn_detached

DEFAULT_SHELL = "bash"


class ShellCommandRunner:
    """Hands the command to `<shell> -c` without waiting for it."""
    def __init__(
        self,
        *,
        shell: str = DEFAULT_SHELL,
        logger: Optional[logging.Logger] = None,
        popen: PopenFactory = subprocess.Popen,
    ):
        if not shell.strip():
            raise ValueError("shell cannot be empty")
        self._shell = shell
        self._logger = logger or logging.getLogger("completion")
        self._popen = popen

    def run(self, command: str) -> None:
        self._logger.info("Running completion command via %s", self._shell)
        spawn_detached(
            [self._shell, "-c", command],
            label="completion command",
            logger=self._logger,
            popen=self._popen,
        )
