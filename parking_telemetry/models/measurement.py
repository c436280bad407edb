# parking_telemetry/models/measurement.py
"""
Append-only measurement stream written by the status ingestion endpoint.
previous_state_duration = how long the sensor held its PRIOR state before `timestamp`,
not how long it will hold the new one.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Interval, ForeignKey, Index
from parking_telemetry.database import Base


class Measurement(Base):
    __tablename__ = "measurements"
    __table_args__ = (
        Index("ix_measurements_sensor_timestamp", "sensor_id", "timestamp"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    sensor_id = Column(String(36), ForeignKey("sensor_info.sensor_id"), nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True)
    state = Column(Boolean, nullable=False)
    previous_state_duration = Column(Interval)

    def __repr__(self):
        return f"<Measurement {self.id} sensor={self.sensor_id} state={self.state} at={self.timestamp}>"
