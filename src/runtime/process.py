"""Detached subprocess spawning shared by notification and completion effects."""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import Callable, Optional, Sequence

PopenFactory = Callable[..., subprocess.Popen]


def spawn_detached(
    args: Sequence[str],
    *,
    label: str,
    logger: logging.Logger,
    popen: PopenFactory = subprocess.Popen,
) -> Optional[subprocess.Popen]:
    """Start `args` with discarded I/O and reap it from a daemon thread.

    Returns None when the process cannot be spawned; the error is logged.
    """
    try:
        process = popen(
            list(args),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except FileNotFoundError:
        logger.debug("%s executable not found: %s", label, args[0])
        return None
    except OSError as error:
        logger.warning("Failed to start %s: %s", label, error)
        return None

    threading.Thread(
        target=_reap,
        args=(process, label, logger),
        daemon=True,
        name=f"reap-{label}",
    ).start()
    return process


def _reap(process: subprocess.Popen, label: str, logger: logging.Logger) -> None:
    returncode = process.wait()
    if returncode != 0:
        logger.debug("%s exited with status %d", label, returncode)
