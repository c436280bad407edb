# parking_telemetry/models/parking.py
"""
Parking + levels tables.
A parking belongs to one client; "complex" is only a grouping label unique per (client, name).
Levels are keyed by (parking_id, floor).
"""

from sqlalchemy import Column, Integer, String, Date, Text, JSON, ForeignKey
from parking_telemetry.database import Base


class Parking(Base):
    __tablename__ = "parking"

    parking_id = Column(String(36), primary_key=True)
    client_id = Column(String(36), ForeignKey("clients.client_id"), nullable=False, index=True)
    complex = Column(String(200), nullable=False)
    parking_alias = Column(String(200), nullable=False)
    installation_date = Column(Date)
    maintenance_date = Column(Date)
    timezone = Column(String(64), default="UTC", nullable=False)
    closing_schedule = Column(JSON)           # 7 "HH:MM" strings indexed by day-of-week (0 = Sunday)
    no_sensors = Column(Integer, default=0, nullable=False)
    no_levels = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<Parking {self.parking_id} alias={self.parking_alias} complex={self.complex}>"


class Level(Base):
    __tablename__ = "levels"

    parking_id = Column(String(36), ForeignKey("parking.parking_id"), primary_key=True)
    floor = Column(Integer, primary_key=True)
    floor_alias = Column(String(200))
    no_sensors = Column(Integer, default=0, nullable=False)
    blob_image = Column(Text)                 # opaque rendering data
    stage_info = Column(JSON)
    layout_info = Column(JSON)

    def __repr__(self):
        return f"<Level {self.parking_id}/{self.floor} alias={self.floor_alias}>"
