# parking_telemetry/services/rollup.py
"""
Scope-wide rollup over the per-group lines.

average_occupancy_percentage is weighted by volume (Σ occupied / Σ total), never
a mean of per-group percentages. Weights are measurement counts under the
distribution model and reconstructed seconds under the duration model.
No data → 0 % occupied and 100 % available.

total_unique_sensors is the MAX of per-group distinct-sensor counts: an
approximation of coverage, not a global distinct count.
"""

from typing import Iterable
from parking_telemetry.services.aggregation_strategies import GroupResult
from parking_telemetry.utils.numbers import percentage


def compute_overall_statistics(groups: Iterable[GroupResult], location_scope: str,
                               execution_time_ms: float = 0.0) -> dict:
    groups = list(groups)
    occupied_weight = sum(g.occupied_weight for g in groups)
    total_weight = sum(g.total_weight for g in groups)
    locations = {g.location_key for g in groups}

    return {
        "total_measurements": sum(g.total_measurements for g in groups),
        "total_occupied_measurements": sum(g.occupied_measurements for g in groups),
        "total_available_measurements": sum(g.available_measurements for g in groups),
        "average_occupancy_percentage": percentage(occupied_weight, total_weight, empty=0.0),
        "average_availability_percentage": percentage(total_weight - occupied_weight, total_weight,
                                                      empty=100.0),
        "total_unique_sensors": max((g.unique_sensors for g in groups), default=0),
        "total_locations_analyzed": len(locations),
        "query_execution_time_ms": execution_time_ms,
        "location_breakdown": {f"{location_scope}s": len(locations)},
    }
