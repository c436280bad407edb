# parking_telemetry/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + live channel.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from parking_telemetry.database import get_db
from parking_telemetry.services.live_status import LiveStatusHub, get_live_hub
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db), hub: LiveStatusHub = Depends(get_live_hub)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "live_subscribers": hub.subscriber_count,
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except SQLAlchemyError as e:
        result["database"] = f"error: {type(e).__name__}"
        result["status"] = "degraded"

    return result
