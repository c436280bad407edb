# parking_telemetry/services/temporal_scope.py
"""
Temporal bucketing resolver.
Maps a time scope (day | month | year) plus optional year/month/day anchors to
  - the predicates restricting measurements.timestamp
  - the bucket expression rows are grouped by (hour-of-day, day-of-month, month-of-year)
  - the bucket's unit label (hour | day | month)

Anchors are parsed as integers but not range-checked: an impossible calendar date
is handed to the store and surfaces as an empty result or a store error.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from sqlalchemy import extract, func
from parking_telemetry.errors import ValidationError


class TimeScope(str, Enum):
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


# scope → (field extracted for the bucket, unit label)
_BUCKETS = {
    TimeScope.DAY: ("hour", "hour"),
    TimeScope.MONTH: ("day", "day"),
    TimeScope.YEAR: ("month", "month"),
}


@dataclass(frozen=True)
class TemporalScope:
    scope: TimeScope
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None

    @property
    def unit(self) -> str:
        return _BUCKETS[self.scope][1]

    @property
    def date_literal(self) -> Optional[str]:
        """Zero-padded YYYY-MM-DD for day scope ("7" → "07")."""
        if self.scope is not TimeScope.DAY:
            return None
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def bucket(self, timestamp_column):
        return extract(_BUCKETS[self.scope][0], timestamp_column)

    def predicates(self, timestamp_column) -> list:
        if self.scope is TimeScope.DAY:
            return [func.date(timestamp_column) == self.date_literal]
        if self.scope is TimeScope.MONTH:
            return [
                extract("year", timestamp_column) == self.year,
                extract("month", timestamp_column) == self.month,
            ]
        if self.year is not None:
            return [extract("year", timestamp_column) == self.year]
        return []   # year scope without anchor → all time


def parse_time_scope(value) -> TimeScope:
    if isinstance(value, TimeScope):
        return value
    try:
        return TimeScope(value)
    except ValueError:
        raise ValidationError("Invalid timeSetting. Must be: day, month, or year")


def _parse_anchor(name: str, value) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"Invalid {name} parameter: '{value}' is not an integer")


def resolve_time_scope(time_scope, year=None, month=None, day=None) -> TemporalScope:
    scope = parse_time_scope(time_scope)
    year = _parse_anchor("year", year)
    month = _parse_anchor("month", month)
    day = _parse_anchor("day", day)

    if scope is TimeScope.DAY and None in (year, month, day):
        raise ValidationError("For day analysis, year, month, and day parameters are required")
    if scope is TimeScope.MONTH and None in (year, month):
        raise ValidationError("For month analysis, year and month parameters are required")

    if scope is TimeScope.MONTH:
        day = None
    elif scope is TimeScope.YEAR:
        month = day = None
    return TemporalScope(scope=scope, year=year, month=month, day=day)
