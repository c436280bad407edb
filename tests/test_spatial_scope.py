# tests/test_spatial_scope.py
"""Unit tests for location scope resolution, filters and caps."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from sqlalchemy.dialects import postgresql
from parking_telemetry.errors import ValidationError
from parking_telemetry.services.aggregation_strategies import DistributionStrategy, DurationReconstructionStrategy
from parking_telemetry.services.query_builder import AnalysisQuery
from parking_telemetry.services.spatial_scope import LocationScope, resolve_location_scope, split_ids
from parking_telemetry.services.temporal_scope import resolve_time_scope

CAPS = {"parking": 20, "floor": 100, "sensor": 50}


class TestResolveLocationScope:
    @pytest.mark.parametrize("scope,cap", [("parking", 20), ("floor", 100), ("sensor", 50)])
    def test_unfiltered_scope_gets_cap(self, scope, cap):
        resolved = resolve_location_scope(scope, row_caps=CAPS)
        assert resolved.row_cap == cap
        assert not resolved.filter_applied

    def test_sensor_filter_removes_cap(self):
        resolved = resolve_location_scope("sensor", sensor_ids="S1,S2,S3", row_caps=CAPS)
        assert resolved.sensor_ids == ["S1", "S2", "S3"]
        assert resolved.row_cap is None

    def test_sensor_scope_ignores_parking_filter(self):
        resolved = resolve_location_scope("sensor", parking_ids="P1", row_caps=CAPS)
        assert resolved.parking_ids == []
        assert resolved.row_cap == 50

    def test_floor_scope_honors_parking_and_floor(self):
        resolved = resolve_location_scope("floor", parking_ids="P1", floors="0, 2", row_caps=CAPS)
        assert resolved.parking_ids == ["P1"]
        assert resolved.floors == [0, 2]
        assert resolved.row_cap is None

    def test_parking_scope_ignores_floor_filter(self):
        resolved = resolve_location_scope("parking", floors="1", row_caps=CAPS)
        assert resolved.floors == []
        assert resolved.row_cap == 20

    def test_non_integer_floor_rejected(self):
        with pytest.raises(ValidationError) as exc:
            resolve_location_scope("floor", floors="1,two", row_caps=CAPS)
        assert "two" in exc.value.message

    def test_unknown_scope_rejected(self):
        with pytest.raises(ValidationError):
            resolve_location_scope("zone", row_caps=CAPS)

    def test_empty_tokens_dropped(self):
        assert split_ids("a, b,,c,") == ["a", "b", "c"]
        assert split_ids(None) == []


class TestLocationDescriptor:
    def test_floor_alias_falls_back_to_number(self):
        scope = resolve_location_scope(LocationScope.FLOOR, row_caps=CAPS)
        row = {"parking_id": "P1", "floor": 2, "parking_alias": "Central", "floor_alias": None}
        location = scope.describe(row)
        assert location["floor_name"] == "Floor 2"
        assert location["display_name"] == "Central - Floor 2"
        assert scope.location_key(row) == "P1-2"

    def test_sensor_descriptor(self):
        scope = resolve_location_scope(LocationScope.SENSOR, row_caps=CAPS)
        row = {"sensor_id": "S1", "sensor_alias": "A-01", "parking_id": "P1",
               "parking_alias": "Central", "floor": 0, "floor_alias": "Ground"}
        location = scope.describe(row)
        assert location["type"] == "sensor"
        assert location["display_name"] == "A-01 (Central - Ground)"


class TestQueryParameters:
    HOSTILE = "S1'); DROP TABLE measurements; --"

    @pytest.mark.parametrize("strategy", [DistributionStrategy(), DurationReconstructionStrategy()])
    def test_filter_values_are_bound_not_inlined(self, strategy):
        query = AnalysisQuery(
            user_id="U1' OR '1'='1",
            temporal=resolve_time_scope("day", "2025", "7", "2"),
            spatial=resolve_location_scope("sensor", sensor_ids=self.HOSTILE, row_caps=CAPS),
        )
        compiled = strategy.build_statement(query).compile(dialect=postgresql.dialect())
        sql = str(compiled)
        assert "DROP TABLE" not in sql
        assert "'1'='1" not in sql
        assert [self.HOSTILE] in compiled.params.values()

    def test_unfiltered_statement_is_limited(self):
        query = AnalysisQuery(
            user_id="U1",
            temporal=resolve_time_scope("year"),
            spatial=resolve_location_scope("sensor", row_caps=CAPS),
        )
        compiled = DistributionStrategy().build_statement(query).compile(dialect=postgresql.dialect())
        assert "LIMIT" in str(compiled)
        assert 50 in compiled.params.values()
