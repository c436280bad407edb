# parking_telemetry/errors.py
"""
Domain error taxonomy. Every failure leaves the API through one envelope:
{"success": false, "error": <kind>, "message": <text>} (see main.py handlers).
"""

from typing import Optional


class TelemetryError(Exception):
    kind = "internal_error"
    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail     # raw internals, only exposed in development


class ValidationError(TelemetryError):
    """Missing/invalid request parameter. Raised before any store access."""
    kind = "validation_error"
    status_code = 400


class NotFoundError(TelemetryError):
    kind = "not_found"
    status_code = 404


class StoreExecutionError(TelemetryError):
    """Query or connection failure inside the relational store."""
    kind = "store_error"
    status_code = 500


class QueryTimeoutError(StoreExecutionError):
    """Statement timeout expired. Safe for the caller to retry."""
    kind = "query_timeout"
    status_code = 503
