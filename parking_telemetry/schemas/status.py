# parking_telemetry/schemas/status.py
from pydantic import BaseModel, StrictBool, field_validator
from datetime import datetime, timedelta, timezone
from typing import Optional
from parking_telemetry.utils.intervals import parse_interval


class StatusIn(BaseModel):
    sensor_id: str
    timestamp: datetime
    state: StrictBool
    previous_state_time: Optional[timedelta] = None    # "00:05:00", "5 minutes" or seconds; null on first report

    @field_validator("timestamp")
    @classmethod
    def _naive_utc(cls, value: datetime) -> datetime:
        # measurements.timestamp is stored as naive UTC
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @field_validator("previous_state_time", mode="before")
    @classmethod
    def _parse_previous_state_time(cls, value):
        if value is None:
            return None
        return parse_interval(value)


class MeasurementOut(BaseModel):
    id: int
    sensor_id: str
    timestamp: datetime
    state: bool
    previous_state_duration: Optional[timedelta]

    class Config:
        from_attributes = True
