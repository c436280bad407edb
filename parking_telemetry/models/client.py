# parking_telemetry/models/client.py
"""
Clients table — tenant root.
The no_* counters are denormalized child counts maintained by the write paths.
"""

from sqlalchemy import Column, Integer, String
from parking_telemetry.database import Base


class Client(Base):
    __tablename__ = "clients"

    client_id = Column(String(36), primary_key=True)
    client_alias = Column(String(200), nullable=False)
    no_users = Column(Integer, default=0, nullable=False)
    no_complexes = Column(Integer, default=0, nullable=False)
    no_parkings = Column(Integer, default=0, nullable=False)
    no_floors = Column(Integer, default=0, nullable=False)
    no_sensors = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<Client {self.client_id} alias={self.client_alias}>"
