# parking_telemetry/services/status_service.py
"""
Status ingestion: appends a measurement and refreshes the sensor's current_state cache.
Measurements are immutable once written.
"""

from sqlalchemy.orm import Session
from parking_telemetry.errors import NotFoundError
from parking_telemetry.models.measurement import Measurement
from parking_telemetry.models.sensor import Sensor
from parking_telemetry.schemas.status import StatusIn
from parking_telemetry.utils.logger import get_logger

logger = get_logger(__name__)


def record_status(db: Session, status: StatusIn) -> tuple[Measurement, Sensor]:
    sensor = db.query(Sensor).filter(Sensor.sensor_id == status.sensor_id).first()
    if not sensor:
        logger.warning(f"[STATUS] unknown sensor {status.sensor_id} — rejected")
        raise NotFoundError("Sensor ID not found.")

    measurement = Measurement(
        sensor_id=sensor.sensor_id,
        timestamp=status.timestamp,
        state=status.state,
        previous_state_duration=status.previous_state_time,
    )
    db.add(measurement)
    sensor.current_state = status.state
    db.commit()
    db.refresh(measurement)

    logger.info(
        f"[STATUS] {sensor.sensor_id} → {'occupied' if status.state else 'available'} "
        f"at {status.timestamp.isoformat()} (prev {status.previous_state_time})"
    )
    return measurement, sensor


def live_payload(measurement: Measurement, sensor: Sensor) -> dict:
    return {
        "type": "status",
        "sensor_id": sensor.sensor_id,
        "parking_id": sensor.parking_id,
        "floor": sensor.floor,
        "state": measurement.state,
        "timestamp": measurement.timestamp.isoformat(),
    }
