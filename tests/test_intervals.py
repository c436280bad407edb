# tests/test_intervals.py
"""Unit tests for previous_state_time interval parsing."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import timedelta
from parking_telemetry.utils.intervals import parse_interval


class TestParseInterval:
    @pytest.mark.parametrize("raw,expected", [
        ("00:45:00", timedelta(minutes=45)),
        ("45 minutes", timedelta(minutes=45)),
        ("1 hour 5 mins", timedelta(hours=1, minutes=5)),
        ("2 days 01:00:00", timedelta(days=2, hours=1)),
        ("10:30", timedelta(hours=10, minutes=30)),
        (90, timedelta(seconds=90)),
        (1.5, timedelta(seconds=1.5)),
    ])
    def test_accepted_forms(self, raw, expected):
        assert parse_interval(raw) == expected

    def test_timedelta_passthrough(self):
        assert parse_interval(timedelta(seconds=3)) == timedelta(seconds=3)

    @pytest.mark.parametrize("raw", ["", "soon", "5 fortnights", "45 minutes later", -1, True, None])
    def test_rejected_forms(self, raw):
        with pytest.raises(ValueError):
            parse_interval(raw)
