"""FastAPI application entrypoint."""
import os

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from record_sync_api.logging import configure_logging
from record_sync_api.routers import health, connections, jobs
from record_sync_api.settings import get_settings
from record_sync_core.jobs import init_db

configure_logging()
logger = structlog.get_logger()

app = FastAPI(title="Record Sync API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api")
app.include_router(connections.router, prefix="/api")
app.include_router(jobs.router, prefix="/api")


@app.on_event("startup")
def startup():
    """Initialize on startup."""
    os.environ.setdefault("SQLITE_PATH", get_settings().sqlite_path)
    logger.info("initializing_database")
    init_db()
