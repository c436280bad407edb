# parking_telemetry/services/spatial_scope.py
"""
Spatial grouping resolver.
Maps a location scope (parking | floor | sensor) plus optional comma-separated ID
filters to grouping columns, display columns, IN-list predicates and a row cap.

Honored filters per scope:
  parking → parking_id
  floor   → parking_id, floor
  sensor  → sensor
The row cap only applies when none of the honored filters was supplied.
Filter values are always bound parameters (column.in_()), never query text.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from parking_telemetry.config import settings
from parking_telemetry.errors import ValidationError
from parking_telemetry.models.parking import Parking, Level
from parking_telemetry.models.sensor import Sensor


class LocationScope(str, Enum):
    PARKING = "parking"
    FLOOR = "floor"
    SENSOR = "sensor"


# Labelled display/grouping columns per scope, in GROUP BY order
_COLUMNS = {
    LocationScope.PARKING: [
        ("parking_id", Sensor.parking_id),
        ("parking_alias", Parking.parking_alias),
    ],
    LocationScope.FLOOR: [
        ("parking_id", Sensor.parking_id),
        ("floor", Sensor.floor),
        ("parking_alias", Parking.parking_alias),
        ("floor_alias", Level.floor_alias),
    ],
    LocationScope.SENSOR: [
        ("sensor_id", Sensor.sensor_id),
        ("sensor_alias", Sensor.sensor_alias),
        ("parking_id", Sensor.parking_id),
        ("parking_alias", Parking.parking_alias),
        ("floor", Sensor.floor),
        ("floor_alias", Level.floor_alias),
    ],
}

_ORDER = {
    LocationScope.PARKING: ["parking_alias"],
    LocationScope.FLOOR: ["parking_id", "floor"],
    LocationScope.SENSOR: ["parking_id", "floor", "sensor_alias"],
}


def split_ids(raw: Optional[str]) -> list:
    """'a, b,,c' → ['a', 'b', 'c']. Empty tokens are dropped."""
    if not raw:
        return []
    return [token.strip() for token in raw.split(",") if token.strip()]


def split_int_ids(raw: Optional[str], name: str) -> list:
    ids = []
    for token in split_ids(raw):
        try:
            ids.append(int(token))
        except ValueError:
            raise ValidationError(f"Invalid {name} filter: '{token}' is not an integer")
    return ids


def floor_label(floor, floor_alias) -> str:
    return floor_alias or f"Floor {floor}"


@dataclass
class SpatialScope:
    scope: LocationScope
    parking_ids: list = field(default_factory=list)
    floors: list = field(default_factory=list)
    sensor_ids: list = field(default_factory=list)
    row_cap: Optional[int] = None

    @property
    def columns(self) -> list:
        return _COLUMNS[self.scope]

    @property
    def order_names(self) -> list:
        return _ORDER[self.scope]

    @property
    def filter_applied(self) -> bool:
        return bool(self.parking_ids or self.floors or self.sensor_ids)

    def predicates(self) -> list:
        clauses = []
        if self.parking_ids:
            clauses.append(Sensor.parking_id.in_(self.parking_ids))
        if self.floors:
            clauses.append(Sensor.floor.in_(self.floors))
        if self.sensor_ids:
            clauses.append(Sensor.sensor_id.in_(self.sensor_ids))
        return clauses

    def location_key(self, row) -> str:
        if self.scope is LocationScope.PARKING:
            return str(row["parking_id"])
        if self.scope is LocationScope.FLOOR:
            return f"{row['parking_id']}-{int(row['floor'])}"
        return str(row["sensor_id"])

    def describe(self, row) -> dict:
        """Location descriptor for one result row, tagged with its scope type."""
        parking_alias = row["parking_alias"]
        if self.scope is LocationScope.PARKING:
            return {
                "type": "parking",
                "parking_id": row["parking_id"],
                "parking_name": parking_alias,
                "display_name": parking_alias,
            }

        floor = int(row["floor"])
        floor_name = floor_label(floor, row["floor_alias"])
        if self.scope is LocationScope.FLOOR:
            return {
                "type": "floor",
                "parking_id": row["parking_id"],
                "parking_name": parking_alias,
                "floor_number": floor,
                "floor_name": floor_name,
                "display_name": f"{parking_alias} - {floor_name}",
            }
        return {
            "type": "sensor",
            "sensor_id": row["sensor_id"],
            "sensor_name": row["sensor_alias"],
            "parking_id": row["parking_id"],
            "parking_name": parking_alias,
            "floor_number": floor,
            "floor_name": floor_name,
            "display_name": f"{row['sensor_alias']} ({parking_alias} - {floor_name})",
        }


def parse_location_scope(value) -> LocationScope:
    if isinstance(value, LocationScope):
        return value
    try:
        return LocationScope(value)
    except ValueError:
        raise ValidationError("Invalid locationSetting. Must be: parking, floor, or sensor")


def resolve_location_scope(location_scope, parking_ids=None, floors=None, sensor_ids=None,
                           row_caps: Optional[dict] = None) -> SpatialScope:
    scope = parse_location_scope(location_scope)
    caps = row_caps or settings.ROW_CAPS

    if scope is LocationScope.SENSOR:
        resolved = SpatialScope(scope, sensor_ids=split_ids(sensor_ids))
    elif scope is LocationScope.FLOOR:
        resolved = SpatialScope(scope, parking_ids=split_ids(parking_ids),
                                floors=split_int_ids(floors, "floor"))
    else:
        resolved = SpatialScope(scope, parking_ids=split_ids(parking_ids))

    if not resolved.filter_applied:
        resolved.row_cap = caps[scope.value]
    return resolved
