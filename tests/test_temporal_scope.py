# tests/test_temporal_scope.py
"""Unit tests for time scope resolution and bucketing."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from sqlalchemy.dialects import postgresql
from parking_telemetry.errors import ValidationError
from parking_telemetry.models.measurement import Measurement
from parking_telemetry.services.temporal_scope import TimeScope, resolve_time_scope


class TestResolveTimeScope:
    def test_day_builds_zero_padded_date(self):
        scope = resolve_time_scope("day", year="2025", month="7", day="2")
        assert scope.scope is TimeScope.DAY
        assert scope.date_literal == "2025-07-02"
        assert scope.unit == "hour"

    def test_day_without_day_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            resolve_time_scope("day", year="2025", month="7")
        assert "year, month, and day" in exc.value.message

    def test_month_requires_year_and_month(self):
        with pytest.raises(ValidationError):
            resolve_time_scope("month", year="2025")

    def test_month_drops_day_anchor(self):
        scope = resolve_time_scope("month", year="2025", month="7", day="9")
        assert scope.day is None
        assert scope.unit == "day"

    def test_year_without_anchor_reads_all_time(self):
        scope = resolve_time_scope("year")
        assert scope.unit == "month"
        assert scope.predicates(Measurement.timestamp) == []

    def test_year_with_anchor_filters_year(self):
        scope = resolve_time_scope("year", year="2024", month="3")
        assert scope.month is None
        assert len(scope.predicates(Measurement.timestamp)) == 1

    def test_unknown_scope_rejected(self):
        with pytest.raises(ValidationError) as exc:
            resolve_time_scope("week")
        assert exc.value.message == "Invalid timeSetting. Must be: day, month, or year"

    def test_non_numeric_anchor_rejected(self):
        with pytest.raises(ValidationError):
            resolve_time_scope("month", year="2025", month="july")

    def test_blank_anchor_counts_as_missing(self):
        with pytest.raises(ValidationError):
            resolve_time_scope("day", year="2025", month="7", day=" ")

    def test_impossible_date_passes_through(self):
        # Not range-checked; the store decides
        scope = resolve_time_scope("day", year="2025", month="2", day="31")
        assert scope.date_literal == "2025-02-31"


class TestBucket:
    @pytest.mark.parametrize("time_setting,field", [("day", "hour"), ("month", "day"), ("year", "month")])
    def test_bucket_extracts_expected_field(self, time_setting, field):
        scope = resolve_time_scope(time_setting, year="2025", month="7", day="2")
        sql = str(scope.bucket(Measurement.timestamp).compile(dialect=postgresql.dialect()))
        assert sql == f"EXTRACT({field} FROM measurements.timestamp)"

    def test_day_predicate_binds_date(self):
        scope = resolve_time_scope("day", year="2025", month="7", day="2")
        clause = scope.predicates(Measurement.timestamp)[0]
        compiled = clause.compile(dialect=postgresql.dialect())
        assert "2025-07-02" not in str(compiled)
        assert "2025-07-02" in compiled.params.values()
