"""Status line fields and values consumed by the waybar custom module."""

from __future__ import annotations

# Payload keys, in serialization order
FIELD_TEXT = "text"
FIELD_ALT = "alt"
FIELD_TOOLTIP = "tooltip"
FIELD_CLASS = "class"

STATUS_FIELDS: tuple[str, ...] = (FIELD_TEXT, FIELD_ALT, FIELD_TOOLTIP, FIELD_CLASS)

# State tags (`alt` prefix)
TAG_STANDBY = "standby"
TAG_RUNNING = "running"
TAG_PAUSED = "paused"

# CSS classes
CLASS_IDLE = "idle"
CLASS_FOCUS = "focus"
CLASS_BREAK = "break"

TOOLTIP_IDLE = "No timer set"
TOOLTIP_PAUSED = "Timer paused"
TOOLTIP_EXPIRES_FORMAT = "Timer expires at {time}"
EXPIRY_TIME_FORMAT = "%H:%M"
