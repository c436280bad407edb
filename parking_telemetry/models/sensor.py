# parking_telemetry/models/sensor.py
"""
Sensor info table.
Every sensor sits on an existing (parking_id, floor) level.
current_state caches the last ingested state; flags are set by the device.
"""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, ForeignKeyConstraint
from parking_telemetry.database import Base


class Sensor(Base):
    __tablename__ = "sensor_info"
    __table_args__ = (
        ForeignKeyConstraint(["parking_id", "floor"], ["levels.parking_id", "levels.floor"]),
    )

    sensor_id = Column(String(36), primary_key=True)
    parking_id = Column(String(36), ForeignKey("parking.parking_id"), nullable=False, index=True)
    floor = Column(Integer, nullable=False)
    sensor_alias = Column(String(200), nullable=False)
    column = Column(Integer)
    row = Column(Integer)
    type = Column(String(50))
    current_state = Column(Boolean, default=False, nullable=False)
    low_battery = Column(Boolean, default=False, nullable=False)
    connection_error = Column(Boolean, default=False, nullable=False)
    error_flag = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<Sensor {self.sensor_id} alias={self.sensor_alias} state={self.current_state}>"
