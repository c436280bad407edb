# parking_telemetry/utils/intervals.py
"""
Parses the interval strings sensors send as previous_state_time:
"00:45:00", "45 minutes", "1 hour 5 mins", "2 days 01:00:00", or plain seconds.
"""

import re
from datetime import timedelta

_CLOCK = re.compile(r"(\d+):(\d{1,2})(?::(\d{1,2}(?:\.\d+)?))?")
_AMOUNT = re.compile(r"(\d+(?:\.\d+)?)\s*([a-z]+)")

_UNIT_SECONDS = {
    "s": 1, "sec": 1, "secs": 1, "second": 1, "seconds": 1,
    "m": 60, "min": 60, "mins": 60, "minute": 60, "minutes": 60,
    "h": 3600, "hr": 3600, "hrs": 3600, "hour": 3600, "hours": 3600,
    "d": 86400, "day": 86400, "days": 86400,
    "w": 604800, "week": 604800, "weeks": 604800,
}


def parse_interval(value) -> timedelta:
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError("interval must be a string or a number of seconds")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError("interval cannot be negative")
        return timedelta(seconds=value)
    if not isinstance(value, str) or not value.strip():
        raise ValueError("interval must be a non-empty string")

    text = value.strip().lower()
    seconds = 0.0

    clock = _CLOCK.search(text)
    if clock:
        hours, minutes, secs = clock.groups()
        seconds += int(hours) * 3600 + int(minutes) * 60 + float(secs or 0)
        text = text[:clock.start()] + " " + text[clock.end():]

    for amount, unit in _AMOUNT.findall(text):
        if unit not in _UNIT_SECONDS:
            raise ValueError(f"unknown interval unit '{unit}'")
        seconds += float(amount) * _UNIT_SECONDS[unit]
    if _AMOUNT.sub("", text).strip():
        raise ValueError(f"unparseable interval '{value}'")
    if not clock and not _AMOUNT.search(text):
        raise ValueError(f"unparseable interval '{value}'")
    return timedelta(seconds=seconds)
