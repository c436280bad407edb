# tests/conftest.py
"""
Shared fixtures. Tests run against an in-memory SQLite store (StaticPool),
rebuilt for every test that asks for `db` or `client`.
"""

import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before parking_telemetry.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["API_KEY"] = ""
os.environ["AGGREGATION_STRATEGY"] = "distribution"

import pytest
from datetime import datetime, timedelta
from parking_telemetry.database import Base, engine, SessionLocal, create_tables
from parking_telemetry.models import Client, Parking, Level, Sensor, Measurement, User, Permission


class Seeder:
    """Writes a minimal tenant tree: one client (C1) and whatever the test adds."""

    def __init__(self, db):
        self.db = db
        db.add(Client(client_id="C1", client_alias="Demo Client"))
        db.commit()

    def user(self, user_id="U1", parkings=()):
        self.db.add(User(user_id=user_id, username=f"user-{user_id}", client_id="C1"))
        for parking_id in parkings:
            self.db.add(Permission(user_id=user_id, parking_id=parking_id))
        self.db.commit()

    def grant(self, user_id, parking_id):
        self.db.add(Permission(user_id=user_id, parking_id=parking_id))
        self.db.commit()

    def parking(self, parking_id, alias=None, floors=(0,), floor_aliases=None, complex_name="North Complex"):
        floor_aliases = floor_aliases or {}
        self.db.add(Parking(parking_id=parking_id, client_id="C1", complex=complex_name,
                            parking_alias=alias or parking_id, no_levels=len(floors)))
        for floor in floors:
            self.db.add(Level(parking_id=parking_id, floor=floor, floor_alias=floor_aliases.get(floor)))
        self.db.commit()

    def sensor(self, sensor_id, parking_id, floor=0, alias=None):
        self.db.add(Sensor(sensor_id=sensor_id, parking_id=parking_id, floor=floor,
                           sensor_alias=alias or sensor_id))
        self.db.commit()

    def readings(self, sensor_id, readings):
        """readings: iterable of (timestamp, state)."""
        previous = None
        for ts, state in readings:
            self.db.add(Measurement(
                sensor_id=sensor_id,
                timestamp=ts,
                state=state,
                previous_state_duration=(ts - previous) if previous else timedelta(0),
            ))
            previous = ts
        self.db.commit()

    def alternating_day(self, sensor_id, day: datetime, every_minutes=15, first_state=True):
        """A full day sampled every `every_minutes`, state flipping each sample."""
        steps = 24 * 60 // every_minutes
        self.readings(sensor_id, [
            (day + timedelta(minutes=every_minutes * i), first_state if i % 2 == 0 else not first_state)
            for i in range(steps)
        ])


@pytest.fixture
def session_factory():
    Base.metadata.drop_all(bind=engine)
    create_tables()
    yield SessionLocal
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seed(db):
    return Seeder(db)


@pytest.fixture
def client(session_factory):
    from fastapi.testclient import TestClient
    from parking_telemetry.main import app

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
