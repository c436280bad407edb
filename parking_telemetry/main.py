# parking_telemetry/main.py
"""
FastAPI application entry point.
Includes security middleware, the error envelope handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from parking_telemetry.routers import analysis, status as status_router, catalog, sensor_stats, health, live
from parking_telemetry.database import create_tables
from parking_telemetry.config import settings
from parking_telemetry.errors import TelemetryError
from parking_telemetry.services.live_status import hub
from parking_telemetry.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Parking Telemetry API",
    description="Sensor status ingestion, live feed and occupancy analytics.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (dashboards are served from other origins) ─────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to dashboard origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth for dashboard endpoints.
    Sensor webhook (/api/v1/status) is excluded — gateways don't send keys.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    open_paths = {"/api/v1/status", "/api/v1/health", "/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"success": False, "error": "unauthorized", "message": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Error envelope ───────────────────────────────────────────────────────────
def error_envelope(kind: str, message: str, detail=None) -> dict:
    body = {"success": False, "error": kind, "message": message}
    if detail is not None and settings.EXPOSE_ERROR_DETAILS:
        body["detail"] = detail
    return body


@app.exception_handler(TelemetryError)
async def telemetry_error_handler(request: Request, exc: TelemetryError):
    if exc.status_code >= 500:
        logger.error(f"{exc.kind} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.kind} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_envelope(exc.kind, exc.message, exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    logger.info(f"validation_error on {request.url.path}: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST,
                        content=error_envelope("validation_error", message or "Invalid request"))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope("internal_error", "Internal server error", str(exc)),
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(status_router.router, prefix="/api/v1", tags=["📡 Sensor Status"])
app.include_router(live.router,          prefix="/api/v1", tags=["🔴 Live"])
app.include_router(analysis.router,      prefix="/api/v1", tags=["📊 Analysis"])
app.include_router(sensor_stats.router,  prefix="/api/v1", tags=["📈 Sensor Stats"])
app.include_router(catalog.router,       prefix="/api/v1", tags=["🅿️  Catalog"])
app.include_router(health.router,        prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Parking Telemetry backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"📊 Aggregation model: {settings.AGGREGATION_STRATEGY}")
    hub.start_heartbeat()
    logger.info(f"🔴 Live channel heartbeat every {settings.LIVE_HEARTBEAT_SECONDS}s")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    await hub.stop_heartbeat()
    logger.info("🛑 Parking Telemetry backend shutting down...")
