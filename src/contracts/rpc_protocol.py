"""Command channel verbs, argument names, and error kinds."""

from __future__ import annotations

VERB_CANCEL = "cancel"
VERB_START = "start"
VERB_INCREASE = "increase"
VERB_TOGGLEPAUSE = "togglepause"
VERB_SKIP = "skip"

VERBS: frozenset[str] = frozenset(
    {
        VERB_CANCEL,
        VERB_START,
        VERB_INCREASE,
        VERB_TOGGLEPAUSE,
        VERB_SKIP,
    }
)

ARG_COMMAND = "command"
ARG_SECONDS = "seconds"

# Accepted argument names per verb.
VERB_ARGUMENTS: dict[str, frozenset[str]] = {
    VERB_CANCEL: frozenset(),
    VERB_START: frozenset({ARG_COMMAND}),
    VERB_INCREASE: frozenset({ARG_SECONDS}),
    VERB_TOGGLEPAUSE: frozenset(),
    VERB_SKIP: frozenset(),
}

ERROR_NO_TIMER_EXISTING = "NoTimerExisting"
ERROR_TIMER_ALREADY_EXISTING = "TimerAlreadyExisting"
ERROR_OUT_OF_RANGE = "OutOfRange"

ERROR_KINDS: frozenset[str] = frozenset(
    {
        ERROR_NO_TIMER_EXISTING,
        ERROR_TIMER_ALREADY_EXISTING,
        ERROR_OUT_OF_RANGE,
    }
)

ERROR_MESSAGES: dict[str, str] = {
    ERROR_NO_TIMER_EXISTING: "no timer exists right now",
    ERROR_TIMER_ALREADY_EXISTING: "there already exists a timer",
    ERROR_OUT_OF_RANGE: "the timer cannot be moved that far",
}

# Wire keys
KEY_VERB = "verb"
KEY_ARGS = "args"
KEY_OK = "ok"
KEY_ERROR = "error"

MAX_FRAME_BYTES = 64 * 1024

# Largest magnitude accepted for one increase or decrease (unsigned 32-bit).
MAX_ADJUST_SECONDS = 2**32 - 1
