# parking_telemetry/services/query_builder.py
"""
Composes the analytics query from resolved scopes.

Every fragment is a SQLAlchemy expression, so user-supplied values (user id,
anchors, ID filters, row cap) always travel as bound parameters.
The permission gate is the inner join on permissions filtered to the requesting
user: no grant → no rows, which is indistinguishable from no data.
"""

from dataclasses import dataclass
from sqlalchemy import and_, select
from parking_telemetry.models.measurement import Measurement
from parking_telemetry.models.parking import Parking, Level
from parking_telemetry.models.sensor import Sensor
from parking_telemetry.models.user import Permission
from parking_telemetry.services.spatial_scope import SpatialScope
from parking_telemetry.services.temporal_scope import TemporalScope


def permitted_measurements(user_id: str):
    """measurements ⋈ sensor_info ⋈ parking ⟕ levels ⋈ permissions(user)."""
    return (
        select()
        .select_from(Measurement)
        .join(Sensor, Measurement.sensor_id == Sensor.sensor_id)
        .join(Parking, Sensor.parking_id == Parking.parking_id)
        .outerjoin(Level, and_(Sensor.parking_id == Level.parking_id, Sensor.floor == Level.floor))
        .join(Permission, Parking.parking_id == Permission.parking_id)
        .where(Permission.user_id == user_id)
    )


@dataclass
class AnalysisQuery:
    user_id: str
    temporal: TemporalScope
    spatial: SpatialScope

    @property
    def bucket(self):
        return self.temporal.bucket(Measurement.timestamp)

    @property
    def predicates(self) -> list:
        return self.temporal.predicates(Measurement.timestamp) + self.spatial.predicates()

    def base(self):
        """Permission-gated FROM/WHERE with the temporal and spatial predicates applied."""
        return permitted_measurements(self.user_id).where(*self.predicates)

    def location_columns(self) -> list:
        return [column.label(name) for name, column in self.spatial.columns]

    def group_columns(self) -> list:
        return [column for _, column in self.spatial.columns]

    def order_columns(self) -> list:
        by_name = dict(self.spatial.columns)
        return [by_name[name] for name in self.spatial.order_names]

    def apply_cap(self, stmt):
        if self.spatial.row_cap is not None:
            stmt = stmt.limit(self.spatial.row_cap)
        return stmt
