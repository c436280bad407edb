# parking_telemetry/services/catalog_service.py
"""
Permission-scoped metadata reads: sensors, parking/level tree, and the dates
that hold measurements (used by dashboards to populate date pickers).
"""

from collections import OrderedDict
from typing import Optional
from sqlalchemy import extract, select
from sqlalchemy.orm import Session
from parking_telemetry.models.measurement import Measurement
from parking_telemetry.models.parking import Parking, Level
from parking_telemetry.models.sensor import Sensor
from parking_telemetry.models.user import Permission
from parking_telemetry.services.spatial_scope import split_ids, split_int_ids
from parking_telemetry.utils.logger import get_logger

logger = get_logger(__name__)


def sensors_for_user(db: Session, user_id: str) -> list[dict]:
    rows = (
        db.query(Sensor, Parking.parking_alias, Parking.complex)
        .join(Parking, Sensor.parking_id == Parking.parking_id)
        .join(Permission, Sensor.parking_id == Permission.parking_id)
        .filter(Permission.user_id == user_id)
        .order_by(Parking.complex, Parking.parking_alias, Sensor.floor, Sensor.sensor_alias)
        .all()
    )
    logger.info(f"[CATALOG] {len(rows)} sensors for user {user_id}")
    return [
        {
            "sensor_id": sensor.sensor_id,
            "sensor_alias": sensor.sensor_alias,
            "parking_id": sensor.parking_id,
            "floor": sensor.floor,
            "current_state": sensor.current_state,
            "parking_alias": parking_alias,
            "complex": complex_name,
            "low_battery": sensor.low_battery,
            "connection_error": sensor.connection_error,
            "error_flag": sensor.error_flag,
        }
        for sensor, parking_alias, complex_name in rows
    ]


def levels_for_user(db: Session, user_id: str) -> list[dict]:
    rows = (
        db.query(Parking.parking_id, Parking.complex, Parking.parking_alias, Level.floor, Level.floor_alias)
        .join(Permission, Parking.parking_id == Permission.parking_id)
        .join(Level, Parking.parking_id == Level.parking_id)
        .filter(Permission.user_id == user_id)
        .order_by(Parking.complex, Parking.parking_alias, Level.floor)
        .all()
    )
    parkings = OrderedDict()
    for row in rows:
        parking = parkings.setdefault(row.parking_id, {
            "parking_id": row.parking_id,
            "complex": row.complex,
            "parking_alias": row.parking_alias,
            "levels": [],
        })
        parking["levels"].append({"floor": row.floor, "floor_alias": row.floor_alias})
    return list(parkings.values())


def available_dates(db: Session, user_id: str, parking_ids: Optional[str] = None,
                    floors: Optional[str] = None, sensor_ids: Optional[str] = None) -> dict:
    ts = Measurement.timestamp
    year, month, day = extract("year", ts), extract("month", ts), extract("day", ts)
    stmt = (
        select(year.label("year"), month.label("month"), day.label("day"))
        .distinct()
        .select_from(Measurement)
        .join(Sensor, Measurement.sensor_id == Sensor.sensor_id)
        .join(Permission, Sensor.parking_id == Permission.parking_id)
        .where(Permission.user_id == user_id)
    )
    if split_ids(parking_ids):
        stmt = stmt.where(Sensor.parking_id.in_(split_ids(parking_ids)))
    if split_ids(floors):
        stmt = stmt.where(Sensor.floor.in_(split_int_ids(floors, "floor")))
    if split_ids(sensor_ids):
        stmt = stmt.where(Sensor.sensor_id.in_(split_ids(sensor_ids)))
    stmt = stmt.order_by(year.desc(), month.desc(), day.desc())

    dates = []
    grouped = OrderedDict()
    for row in db.execute(stmt).mappings():
        y, m, d = int(row["year"]), int(row["month"]), int(row["day"])
        iso = f"{y:04d}-{m:02d}-{d:02d}"
        dates.append(iso)
        grouped.setdefault(str(y), OrderedDict()).setdefault(str(m), []).append({"date": iso, "day": d})

    return {"available_dates": dates, "grouped_by_year_month": grouped, "total_dates": len(dates)}
