# parking_telemetry/schemas/analysis.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Annotated, Literal, Optional, Union


class AnalysisFilters(BaseModel):
    # Raw, unprocessed query strings
    parking_ids: Optional[str] = None
    floors: Optional[str] = None
    sensor_ids: Optional[str] = None
    year: Optional[str] = None
    month: Optional[str] = None
    day: Optional[str] = None


class AnalysisParameters(BaseModel):
    user_id: str
    location_setting: str
    time_setting: str
    filters: AnalysisFilters


class OverallStatistics(BaseModel):
    total_measurements: int
    total_occupied_measurements: int
    total_available_measurements: int
    average_occupancy_percentage: float
    average_availability_percentage: float
    total_unique_sensors: int
    total_locations_analyzed: int
    query_execution_time_ms: float
    location_breakdown: dict[str, int]


class ParkingLocation(BaseModel):
    type: Literal["parking"] = "parking"
    parking_id: str
    parking_name: str
    display_name: str


class FloorLocation(BaseModel):
    type: Literal["floor"] = "floor"
    parking_id: str
    parking_name: str
    floor_number: int
    floor_name: str
    display_name: str


class SensorLocation(BaseModel):
    type: Literal["sensor"] = "sensor"
    sensor_id: str
    sensor_name: str
    parking_id: str
    parking_name: str
    floor_number: int
    floor_name: str
    display_name: str


Location = Annotated[Union[ParkingLocation, FloorLocation, SensorLocation], Field(discriminator="type")]


class GroupMetrics(BaseModel):
    occupancy_percentage: float
    availability_percentage: float
    occupied_hours: float
    available_hours: float
    total_hours: float
    state_changes: int
    unique_sensors: int
    activity_rate: float
    total_measurements: int
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    # duration model only
    occupied_seconds: Optional[float] = None
    available_seconds: Optional[float] = None
    normalized_rotation: Optional[float] = None


class LocationAnalysis(BaseModel):
    time_period: int
    location: Location
    metrics: GroupMetrics


class AnalysisMetadata(BaseModel):
    locations_analyzed: int
    time_periods_per_location: int
    analysis_scope: Literal["filtered_locations", "all_user_locations"]
    filter_applied: bool
    row_cap: Optional[int] = None
    result_capped: bool = False
    separate_lines: bool = True
    execution_time_ms: float


class AnalysisResponse(BaseModel):
    success: bool = True
    parameters: AnalysisParameters
    overall_statistics: OverallStatistics
    location_analysis: list[LocationAnalysis]
    total_records: int
    analysis_type: str
    time_unit: Literal["hour", "day", "month"]
    metadata: AnalysisMetadata
    notes: list[str] = []


class DateEntry(BaseModel):
    date: str
    day: int


class AvailableDatesOut(BaseModel):
    success: bool = True
    available_dates: list[str]
    grouped_by_year_month: dict[str, dict[str, list[DateEntry]]]
    total_dates: int
