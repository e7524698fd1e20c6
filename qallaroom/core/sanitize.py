"""Clamp untrusted client input into safe values.

Nothing in here raises: bad input collapses to an empty string or a default.
"""

import re
from typing import Any

DEFAULT_COLOR = "#5865F2"
DEFAULT_NAME = "Guest"

_HEX_COLOR = re.compile(r"#[0-9a-fA-F]{6}")


def clamp_string(value: Any, max_len: int = 200) -> str:
    """Trim *value* and cut it to *max_len* characters; non-strings become ``""``."""
    if not isinstance(value, str):
        return ""
    return value.strip()[:max_len]


def normalize_color(value: Any) -> str:
    """Return *value* if it is a ``#rrggbb`` hex color, else the brand default."""
    if not isinstance(value, str):
        return DEFAULT_COLOR
    value = value.strip()
    if _HEX_COLOR.fullmatch(value):
        return value
    return DEFAULT_COLOR
