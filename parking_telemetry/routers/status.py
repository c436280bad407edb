# parking_telemetry/routers/status.py
"""
Sensor status ingestion.
POST /status — appends a measurement and pushes it to live subscribers.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from parking_telemetry.database import get_db
from parking_telemetry.schemas.status import StatusIn, MeasurementOut
from parking_telemetry.services.live_status import LiveStatusHub, get_live_hub
from parking_telemetry.services.status_service import record_status, live_payload

router = APIRouter()


@router.post("/status", response_model=MeasurementOut, status_code=status.HTTP_201_CREATED,
             summary="Sensor webhook — record a state change")
async def post_status(body: StatusIn, db: Session = Depends(get_db),
                      hub: LiveStatusHub = Depends(get_live_hub)):
    measurement, sensor = record_status(db, body)
    await hub.broadcast(live_payload(measurement, sensor))
    return measurement
