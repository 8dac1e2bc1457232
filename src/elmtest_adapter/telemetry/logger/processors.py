# src/elmtest_adapter/telemetry/logger/processors.py

"""
structlog processors shared by console and file output.
"""

import logging
from typing import Any

from structlog.typing import EventDict, WrappedLogger

LEVEL_EMOJIS: dict[str, str] = {
    "debug": "🐛",
    "info": "ℹ️",
    "warning": "⚠️",
    "error": "❌",
    "critical": "💥",
}

# Always rendered, even when unset.
REQUIRED_KEYS = ("event", "level", "logger", "timestamp")


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefixes the event with an emoji for its level."""
    level = str(event_dict.get("level", method_name)).lower()
    emoji = event_dict.pop("emoji", None) or LEVEL_EMOJIS.get(level)
    if emoji and isinstance(event_dict.get("event"), str):
        event_dict["event"] = f"{emoji} {event_dict['event']}"
    return event_dict


def remove_extra_keys_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Drops context keys bound to None, e.g. an unset compiler path."""
    for key in [k for k, v in event_dict.items() if v is None and k not in REQUIRED_KEYS]:
        del event_dict[key]
    return event_dict


def level_name(level: int) -> str:
    name: Any = logging.getLevelName(level)
    return name if isinstance(name, str) else "INFO"

# 🔼⚙️
