# parking_telemetry/schemas/sensor_stats.py
from pydantic import BaseModel
from typing import Optional


class SensorStatsOut(BaseModel):
    sensor_id: str
    sensor_alias: str
    parking_alias: str
    floor: int
    floor_alias: Optional[str]
    occupied_seconds: float
    total_seconds: float
    occupation_percentage: float
    normalized_rotation: float     # available→occupied transitions per tracked second
