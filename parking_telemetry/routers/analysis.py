# parking_telemetry/routers/analysis.py
"""
Occupancy analytics endpoints.
GET /analysis        — bucketed occupancy per location (parking / floor / sensor).
GET /analysis/dates  — dates holding measurements, for date pickers.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from parking_telemetry.database import get_db
from parking_telemetry.errors import ValidationError
from parking_telemetry.schemas.analysis import AnalysisResponse, AvailableDatesOut
from parking_telemetry.services.analysis_request import AnalysisRequest
from parking_telemetry.services.catalog_service import available_dates
from parking_telemetry.services.occupancy_aggregator import OccupancyAggregator, get_aggregator

router = APIRouter()


@router.get("/analysis", response_model=AnalysisResponse, summary="Occupancy analysis by time bucket and location")
def get_analysis(
    user_id: Optional[str] = None,
    location_setting: Optional[str] = Query(None, alias="locationSetting"),
    time_setting: Optional[str] = Query(None, alias="timeSetting"),
    parking_id: Optional[str] = Query(None, description="Comma-separated parking IDs"),
    floor: Optional[str] = Query(None, description="Comma-separated floor numbers"),
    sensor: Optional[str] = Query(None, description="Comma-separated sensor IDs"),
    year: Optional[str] = None,
    month: Optional[str] = None,
    day: Optional[str] = None,
    aggregator: OccupancyAggregator = Depends(get_aggregator),
):
    """
    One line per (time bucket × location). Buckets are hours of a day, days of
    a month or months of a year. Only parkings the user holds a grant on are read;
    unfiltered floor/sensor/parking requests are capped.
    """
    request = AnalysisRequest.from_query(
        user_id, location_setting, time_setting,
        parking_ids=parking_id, floors=floor, sensor_ids=sensor,
        year=year, month=month, day=day,
    )
    return aggregator.analyze(request)


@router.get("/analysis/dates", response_model=AvailableDatesOut, summary="Dates with recorded measurements")
def get_available_dates(
    user_id: Optional[str] = None,
    parking_ids: Optional[str] = None,
    floors: Optional[str] = None,
    sensor_ids: Optional[str] = None,
    db: Session = Depends(get_db),
):
    if not user_id:
        raise ValidationError("Missing required parameter: user_id")
    return available_dates(db, user_id, parking_ids, floors, sensor_ids)
