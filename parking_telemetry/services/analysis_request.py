# parking_telemetry/services/analysis_request.py
"""
Validated analytics request.
from_query() runs every check (required params, enum membership, per-scope
anchors, numeric filter tokens) so a bad request never reaches the store.
"""

from dataclasses import dataclass
from typing import Optional
from parking_telemetry.errors import ValidationError
from parking_telemetry.schemas.analysis import AnalysisFilters, AnalysisParameters
from parking_telemetry.services.spatial_scope import SpatialScope, resolve_location_scope
from parking_telemetry.services.temporal_scope import TemporalScope, resolve_time_scope


@dataclass
class AnalysisRequest:
    user_id: str
    temporal: TemporalScope
    spatial: SpatialScope
    parameters: AnalysisParameters

    @classmethod
    def from_query(cls, user_id: Optional[str], location_setting: Optional[str],
                   time_setting: Optional[str], parking_ids: Optional[str] = None,
                   floors: Optional[str] = None, sensor_ids: Optional[str] = None,
                   year: Optional[str] = None, month: Optional[str] = None,
                   day: Optional[str] = None, row_caps: Optional[dict] = None) -> "AnalysisRequest":
        if not user_id or not location_setting or not time_setting:
            raise ValidationError("Missing required parameters: user_id, locationSetting, timeSetting")

        spatial = resolve_location_scope(location_setting, parking_ids, floors, sensor_ids, row_caps)
        temporal = resolve_time_scope(time_setting, year, month, day)

        parameters = AnalysisParameters(
            user_id=user_id,
            location_setting=spatial.scope.value,
            time_setting=temporal.scope.value,
            filters=AnalysisFilters(
                parking_ids=parking_ids or None,
                floors=floors or None,
                sensor_ids=sensor_ids or None,
                year=year or None,
                month=month or None,
                day=day or None,
            ),
        )
        return cls(user_id=user_id, temporal=temporal, spatial=spatial, parameters=parameters)
