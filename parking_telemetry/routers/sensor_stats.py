# parking_telemetry/routers/sensor_stats.py
"""Per-sensor occupation % and rotation for one parking."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from parking_telemetry.database import get_db
from parking_telemetry.schemas.sensor_stats import SensorStatsOut
from parking_telemetry.services.sensor_stats_service import sensor_occupation_stats

router = APIRouter()


@router.get("/stats/sensors", response_model=list[SensorStatsOut], summary="Occupation and rotation per sensor")
def get_sensor_stats(
    user_id: str,
    parking_id: str,
    exact_date: Optional[date] = Query(None, alias="date"),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """Pass `date` for a single day, or `start_date` + `end_date` (inclusive)."""
    return sensor_occupation_stats(db, user_id, parking_id,
                                   exact_date=exact_date, start_date=start_date, end_date=end_date)
