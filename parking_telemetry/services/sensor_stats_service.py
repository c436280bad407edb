# parking_telemetry/services/sensor_stats_service.py
"""
Per-sensor occupation and rotation for one parking over a day or a date range.

Durations come from consecutive events of each sensor (same rule as the
duration model): the gap to the next event counts toward the state held during it.
normalized_rotation = available→occupied transitions / tracked seconds (4 dp).
"""

from datetime import date, datetime, time, timedelta
from typing import Optional
from sqlalchemy import Boolean, DateTime, and_, case, func, select
from sqlalchemy.orm import Session
from parking_telemetry.errors import ValidationError
from parking_telemetry.models.measurement import Measurement
from parking_telemetry.models.parking import Parking, Level
from parking_telemetry.models.sensor import Sensor
from parking_telemetry.services.permissions import has_access
from parking_telemetry.utils.numbers import percentage, ratio, round_half_up
from parking_telemetry.utils.sql import epoch_seconds
from parking_telemetry.utils.logger import get_logger

logger = get_logger(__name__)


def _window_predicates(exact_date: Optional[date], start_date: Optional[date],
                       end_date: Optional[date]) -> list:
    ts = Measurement.timestamp
    if exact_date is not None:
        return [func.date(ts) == exact_date.isoformat()]
    if start_date is None or end_date is None:
        raise ValidationError("Missing required parameters (parking_id, date filters)")
    if end_date < start_date:
        raise ValidationError("end_date must not be before start_date")
    return [
        ts >= datetime.combine(start_date, time.min),
        ts < datetime.combine(end_date + timedelta(days=1), time.min),
    ]


def sensor_occupation_stats(db: Session, user_id: str, parking_id: str,
                            exact_date: Optional[date] = None,
                            start_date: Optional[date] = None,
                            end_date: Optional[date] = None) -> list[dict]:
    predicates = _window_predicates(exact_date, start_date, end_date)
    if not has_access(db, user_id, parking_id):
        logger.info(f"[STATS] user {user_id} has no grant on parking {parking_id}")
        return []

    window = {"partition_by": Measurement.sensor_id, "order_by": Measurement.timestamp}
    stream = (
        select(
            Measurement.sensor_id,
            Measurement.state,
            Measurement.timestamp,
            func.lead(Measurement.timestamp, type_=DateTime).over(**window).label("next_ts"),
            func.lead(Measurement.state, type_=Boolean).over(**window).label("next_state"),
        )
        .join(Sensor, Measurement.sensor_id == Sensor.sensor_id)
        .where(Sensor.parking_id == parking_id, *predicates)
        .subquery("sensor_stream")
    )

    gap = epoch_seconds(stream.c.next_ts, stream.c.timestamp)
    stmt = (
        select(
            stream.c.sensor_id,
            Sensor.sensor_alias,
            Parking.parking_alias,
            Sensor.floor,
            Level.floor_alias,
            func.sum(case((stream.c.state == True, gap), else_=0.0)).label("occupied_seconds"),  # noqa: E712
            func.sum(gap).label("total_seconds"),
            func.count().filter(and_(stream.c.state == False,                                    # noqa: E712
                                     stream.c.next_state == True)).label("arrivals"),             # noqa: E712
        )
        .select_from(stream)
        .join(Sensor, stream.c.sensor_id == Sensor.sensor_id)
        .join(Parking, Sensor.parking_id == Parking.parking_id)
        .outerjoin(Level, and_(Sensor.parking_id == Level.parking_id, Sensor.floor == Level.floor))
        .where(stream.c.next_ts.isnot(None))
        .group_by(stream.c.sensor_id, Sensor.sensor_alias, Parking.parking_alias, Sensor.floor, Level.floor_alias)
        .order_by(stream.c.sensor_id)
    )

    results = []
    for row in db.execute(stmt).mappings():
        occupied = float(row["occupied_seconds"] or 0)
        total = float(row["total_seconds"] or 0)
        results.append({
            "sensor_id": row["sensor_id"],
            "sensor_alias": row["sensor_alias"],
            "parking_alias": row["parking_alias"],
            "floor": int(row["floor"]),
            "floor_alias": row["floor_alias"],
            "occupied_seconds": round_half_up(occupied, 3),
            "total_seconds": round_half_up(total, 3),
            "occupation_percentage": percentage(occupied, total, empty=0.0),
            "normalized_rotation": ratio(int(row["arrivals"] or 0), total, places=4),
        })
    logger.info(f"[STATS] parking {parking_id}: {len(results)} sensors")
    return results
