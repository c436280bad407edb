# parking_telemetry/routers/catalog.py
"""Sensor and level listings, limited to the parkings a user may see."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parking_telemetry.database import get_db
from parking_telemetry.schemas.catalog import SensorListOut, ParkingLevelsOut
from parking_telemetry.services.catalog_service import sensors_for_user, levels_for_user

router = APIRouter()


@router.get("/sensors", response_model=SensorListOut, summary="Sensors visible to a user")
def get_sensors(user_id: str, db: Session = Depends(get_db)):
    sensors = sensors_for_user(db, user_id)
    return {"sensors": sensors, "count": len(sensors)}


@router.get("/levels", response_model=list[ParkingLevelsOut], summary="Parkings and their levels for a user")
def get_levels(user_id: str, db: Session = Depends(get_db)):
    return levels_for_user(db, user_id)
