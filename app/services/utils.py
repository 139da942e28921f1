"""
Utility functions shared by the store and services
"""
import math
from datetime import datetime, timezone
from typing import Any


def utc_timestamp() -> str:
    """
    Current UTC time as ISO-8601 with millisecond precision and a Z suffix
    (e.g. 2024-01-01T09:30:00.123Z)
    """
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_int(value: Any) -> int:
    """
    Integer from an int, a float (truncated toward zero) or a numeric string
    (surrounding whitespace allowed)

    Raises ValueError for anything else.
    """
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"{value!r} is not an integer")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise ValueError(f"{value!r} is not an integer")
