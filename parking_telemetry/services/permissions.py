# parking_telemetry/services/permissions.py
"""
Permission gate. A (user_id, parking_id) row grants read access to the whole parking.
Analytics queries apply the gate as a join (query_builder.permitted_measurements);
has_access() is the single-parking check for the per-parking endpoints.
"""

from sqlalchemy.orm import Session
from parking_telemetry.models.user import Permission


def has_access(db: Session, user_id: str, parking_id: str) -> bool:
    return db.query(Permission).filter(
        Permission.user_id == user_id,
        Permission.parking_id == parking_id,
    ).first() is not None
