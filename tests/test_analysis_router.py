# tests/test_analysis_router.py
"""HTTP tests for /api/v1/analysis and the error envelope."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from datetime import datetime
from parking_telemetry.database import SessionLocal
from parking_telemetry.main import app
from parking_telemetry.services.aggregation_strategies import DurationReconstructionStrategy
from parking_telemetry.services.occupancy_aggregator import OccupancyAggregator, get_aggregator

DAY_PARAMS = {"user_id": "U1", "locationSetting": "parking", "timeSetting": "day",
              "year": "2025", "month": "7", "day": "2"}


@pytest.fixture
def seeded(seed):
    seed.parking("P1", alias="Central", floors=(0, 1), floor_aliases={0: "Ground"})
    seed.sensor("S1", "P1", floor=0)
    seed.sensor("S2", "P1", floor=1)
    seed.user("U1", parkings=["P1"])
    seed.readings("S1", [(datetime(2025, 7, 2, 9, 0), False), (datetime(2025, 7, 2, 9, 30), True)])
    seed.readings("S2", [(datetime(2025, 7, 2, 14, 0), True)])
    return seed


class TestAnalysisEndpoint:
    def test_parking_day_payload(self, client, seeded):
        resp = client.get("/api/v1/analysis", params=DAY_PARAMS)
        assert resp.status_code == 200
        body = resp.json()

        assert body["success"] is True
        assert body["time_unit"] == "hour"
        assert body["analysis_type"] == "measurement_distribution"
        assert [line["time_period"] for line in body["location_analysis"]] == [9, 14]
        assert body["location_analysis"][0]["location"]["type"] == "parking"
        assert body["location_analysis"][0]["location"]["display_name"] == "Central"
        assert body["overall_statistics"]["location_breakdown"] == {"parkings": 1}
        assert body["overall_statistics"]["average_occupancy_percentage"] == 66.67
        assert body["parameters"]["filters"]["day"] == "2"
        assert body["metadata"]["time_periods_per_location"] == 2
        assert body["metadata"]["separate_lines"] is True

    def test_floor_lines_use_alias_or_number(self, client, seeded):
        params = dict(DAY_PARAMS, locationSetting="floor")
        body = client.get("/api/v1/analysis", params=params).json()
        names = {line["location"]["floor_name"] for line in body["location_analysis"]}
        assert names == {"Ground", "Floor 1"}
        assert body["overall_statistics"]["location_breakdown"] == {"floors": 2}

    def test_duration_model_when_configured(self, client, seeded):
        app.dependency_overrides[get_aggregator] = lambda: OccupancyAggregator(
            SessionLocal, DurationReconstructionStrategy())
        body = client.get("/api/v1/analysis", params=dict(DAY_PARAMS, locationSetting="sensor")).json()

        assert body["analysis_type"] == "duration_reconstruction"
        first = body["location_analysis"][0]
        assert first["location"]["sensor_id"] == "S1"
        assert first["metrics"]["available_seconds"] == pytest.approx(1800, abs=0.01)


class TestAnalysisValidation:
    @pytest.fixture
    def aggregator(self):
        aggregator = MagicMock()
        app.dependency_overrides[get_aggregator] = lambda: aggregator
        return aggregator

    @pytest.mark.parametrize("missing", ["user_id", "locationSetting", "timeSetting"])
    def test_missing_required_parameter(self, client, aggregator, missing):
        params = {k: v for k, v in DAY_PARAMS.items() if k != missing}
        resp = client.get("/api/v1/analysis", params=params)

        assert resp.status_code == 400
        assert resp.json() == {
            "success": False,
            "error": "validation_error",
            "message": "Missing required parameters: user_id, locationSetting, timeSetting",
        }
        aggregator.analyze.assert_not_called()

    def test_day_requires_day(self, client, aggregator):
        params = {k: v for k, v in DAY_PARAMS.items() if k != "day"}
        resp = client.get("/api/v1/analysis", params=params)
        assert resp.status_code == 400
        assert "day parameters are required" in resp.json()["message"]
        aggregator.analyze.assert_not_called()

    def test_invalid_location_setting(self, client, aggregator):
        resp = client.get("/api/v1/analysis", params=dict(DAY_PARAMS, locationSetting="zone"))
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid locationSetting. Must be: parking, floor, or sensor"

    def test_non_integer_floor_filter(self, client, aggregator):
        resp = client.get("/api/v1/analysis", params=dict(DAY_PARAMS, locationSetting="floor", floor="1,x"))
        assert resp.status_code == 400
        aggregator.analyze.assert_not_called()


class TestStoreFailureEnvelope:
    def test_store_error_is_generic(self, client):
        from parking_telemetry.errors import StoreExecutionError

        aggregator = MagicMock()
        aggregator.analyze.side_effect = StoreExecutionError("Analysis operation failed",
                                                             detail="relation \"measurements\" does not exist")
        app.dependency_overrides[get_aggregator] = lambda: aggregator

        resp = client.get("/api/v1/analysis", params=DAY_PARAMS)
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "store_error", "message": "Analysis operation failed"}
