"""
Isopod Orders service
Order dashboard API for a live-animal and terrarium-supply shop
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from pathlib import Path
import subprocess
import os

from isopod_orders.core import ServiceHealth, setup_logging, RequestLoggingMiddleware, get_logger
from isopod_orders.core_settings import get_settings
from isopod_orders.api.auth import router as auth_router
from isopod_orders.api.routes import router as orders_router
from isopod_orders.infrastructure import db

settings = get_settings()

SERVICE_NAME = settings.SERVICE_NAME
SERVICE_VERSION = settings.SERVICE_VERSION
SERVICE_DESCRIPTION = "Order management for live-animal and terrarium-supply shipments"
PROJECT_ROOT = Path(__file__).resolve().parent.parent

setup_logging(service_name=SERVICE_NAME, level=settings.LOG_LEVEL)

logger = get_logger(__name__)

def run_migrations() -> None:
    logger.info("Running database migrations")
    result = subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        check=False,
    )
    if result.returncode != 0:
        logger.warning(f"Migration output: {result.stderr}")
    else:
        logger.info("Database migrations completed")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    logger.info(f"Starting {SERVICE_NAME} version {SERVICE_VERSION}")

    if settings.RUN_MIGRATIONS:
        run_migrations()

    try:
        db.init_models()
        logger.info("Database models initialized")
    except Exception:
        logger.error("Failed to initialize database models", exc_info=True)
        raise

    if not settings.APP_ACCESS_KEY:
        logger.warning("APP_ACCESS_KEY is not set; every order request will be rejected")

    logger.info(f"{SERVICE_NAME} started successfully")

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")

app = FastAPI(
    title=SERVICE_NAME,
    description=SERVICE_DESCRIPTION,
    version=SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

health_service = ServiceHealth(SERVICE_NAME, SERVICE_VERSION, engine_factory=lambda: db.engine)
app.include_router(health_service.create_health_router())

app.include_router(auth_router)
app.include_router(orders_router)

@app.get("/")
async def root():
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "running",
        "environment": os.getenv("ENVIRONMENT", "development"),
        "docs": "/api/docs"
    }
