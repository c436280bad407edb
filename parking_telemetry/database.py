# parking_telemetry/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL (SQLite accepted for local runs and tests).
All models are auto-imported in create_tables() so every table is created in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from parking_telemetry.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # One shared in-process connection; FastAPI runs sync routes in a threadpool
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_pre_ping": True,          # Auto-reconnect if DB connection drops
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
    }


engine = create_engine(
    settings.DATABASE_URL,
    echo=False,                  # Set True to log all SQL queries (debug only)
    **_engine_options(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from parking_telemetry.models.client import Client                # noqa
    from parking_telemetry.models.parking import Parking, Level       # noqa
    from parking_telemetry.models.sensor import Sensor                # noqa
    from parking_telemetry.models.measurement import Measurement      # noqa
    from parking_telemetry.models.user import User, Permission        # noqa

    Base.metadata.create_all(bind=bind or engine)
