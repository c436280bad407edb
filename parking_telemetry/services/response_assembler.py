# parking_telemetry/services/response_assembler.py
"""Shapes per-group lines + rollup into the analytics payload."""

from parking_telemetry.schemas.analysis import AnalysisMetadata, AnalysisResponse, LocationAnalysis
from parking_telemetry.services.aggregation_strategies import AggregationStrategy, GroupResult
from parking_telemetry.services.analysis_request import AnalysisRequest
from parking_telemetry.utils.numbers import round_half_up


def assemble_response(request: AnalysisRequest, strategy: AggregationStrategy,
                      groups: list[GroupResult], overall: dict,
                      execution_time_ms: float) -> AnalysisResponse:
    spatial = request.spatial
    locations = overall["total_locations_analyzed"]
    cap = spatial.row_cap

    metadata = AnalysisMetadata(
        locations_analyzed=locations,
        time_periods_per_location=int(round_half_up(len(groups) / (locations or 1), 0)),
        analysis_scope="filtered_locations" if spatial.filter_applied else "all_user_locations",
        filter_applied=spatial.filter_applied,
        row_cap=cap,
        result_capped=cap is not None and len(groups) >= cap,
        execution_time_ms=execution_time_ms,
    )

    return AnalysisResponse(
        parameters=request.parameters,
        overall_statistics=overall,
        location_analysis=[
            LocationAnalysis(time_period=g.time_period, location=g.location, metrics=g.metrics)
            for g in groups
        ],
        total_records=len(groups),
        analysis_type=strategy.analysis_type,
        time_unit=request.temporal.unit,
        metadata=metadata,
        notes=list(strategy.notes),
    )
