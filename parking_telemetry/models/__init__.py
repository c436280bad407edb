# Parking Telemetry — Database Models
# Import all models here for SQLAlchemy discovery

from parking_telemetry.models.client import Client                # noqa
from parking_telemetry.models.parking import Parking, Level       # noqa
from parking_telemetry.models.sensor import Sensor                # noqa
from parking_telemetry.models.measurement import Measurement      # noqa
from parking_telemetry.models.user import User, Permission        # noqa
