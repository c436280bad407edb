# parking_telemetry/schemas/catalog.py
from pydantic import BaseModel
from typing import Optional


class SensorOut(BaseModel):
    sensor_id: str
    sensor_alias: str
    parking_id: str
    floor: int
    current_state: bool
    parking_alias: str
    complex: str
    low_battery: bool = False
    connection_error: bool = False
    error_flag: bool = False


class SensorListOut(BaseModel):
    success: bool = True
    sensors: list[SensorOut]
    count: int


class LevelOut(BaseModel):
    floor: int
    floor_alias: Optional[str]


class ParkingLevelsOut(BaseModel):
    parking_id: str
    complex: str
    parking_alias: str
    levels: list[LevelOut]
