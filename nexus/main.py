from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from pathlib import Path

from nexus.database import engine, Base
from nexus import models  # noqa: F401  registers all tables with Base
from nexus.auto_migrate import auto_migrate
from nexus.services.scheduler_service import start_scheduler, stop_scheduler
from nexus.routes import habits, dates, analytics, journal, settings, sync, backups
from nexus.constants import (
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV, CORS_ALLOWED_ORIGINS
)

LOG_DIR = os.getenv("NEXUS_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("NEXUS_LOG_FILE", "app.log")

try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("nexus")

Base.metadata.create_all(bind=engine)

# Add columns introduced since the database was created
try:
    auto_migrate()
except Exception as e:
    logger.error(f"Auto-migration failed: {e}")

app = FastAPI(
    title="Nexus Habits API",
    description="Habit tracking, journaling and adherence analytics",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (habits, dates, analytics, journal, settings, sync, backups):
    app.include_router(module.router)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Nexus API started. Logging to: {log_path}")
    start_scheduler()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Nexus API")
    stop_scheduler()


# Health check (no auth required)
@app.get("/api/health")
async def health():
    return {"message": "Nexus Habits API", "status": "active"}
