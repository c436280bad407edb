# parking_telemetry/models/user.py
"""
Users + permissions tables.
A permission row grants read access to every level and sensor of one parking.
"""

from sqlalchemy import Column, String, Boolean, ForeignKey
from parking_telemetry.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True)
    username = Column(String(200), unique=True, nullable=False)
    administrator = Column(Boolean, default=False, nullable=False)
    client_id = Column(String(36), ForeignKey("clients.client_id"), index=True)

    def __repr__(self):
        return f"<User {self.username} admin={self.administrator}>"


class Permission(Base):
    __tablename__ = "permissions"

    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    parking_id = Column(String(36), ForeignKey("parking.parking_id"), primary_key=True, index=True)

    def __repr__(self):
        return f"<Permission user={self.user_id} parking={self.parking_id}>"
