# parkwatch/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, and all routers.
Every error leaves the API as {"success": false, "message": ...}.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
from parkwatch.routers import (
    auth, users, vehicles, visitor_passes, verification, violations, payments, parking_lots, reports, health,
)
from parkwatch.database import create_tables
from parkwatch.config import settings
from parkwatch.errors import ParkWatchError
from parkwatch.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="ParkWatch API",
    description="Residential parking — visitor passes, plate verification, tickets and payments.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (the web dashboard runs on its own origin) ─────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the dashboard origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
OPEN_PATHS = {
    "/health", "/docs", "/redoc", "/openapi.json",
    "/login", "/admin/login", "/users/register", "/visitors/register",
}


class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth for everything except login, registration and health.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        if request.url.path in OPEN_PATHS or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"success": False, "message": "Invalid or missing API key"},
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


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(ParkWatchError)
async def parkwatch_error_handler(request: Request, exc: ParkWatchError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"success": False, "message": message})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Server error"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(auth.router,           tags=["🔑 Auth"])
app.include_router(users.router,          tags=["👤 Users"])
app.include_router(vehicles.router,       tags=["🚗 Vehicles"])
app.include_router(visitor_passes.router, tags=["🎫 Visitor Passes"])
app.include_router(verification.router,   tags=["🔍 Plate Verification"])
app.include_router(violations.router,     tags=["🚨 Violations"])
app.include_router(payments.router,       tags=["💳 Payments"])
app.include_router(parking_lots.router,   tags=["🅿️  Parking Lots"])
app.include_router(reports.router,        tags=["📋 Reports"])
app.include_router(health.router,         tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 ParkWatch backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"🎫 Pass tiers: {[(t['type'], t['total']) for t in settings.PASS_TIERS]}")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 ParkWatch backend shutting down...")
