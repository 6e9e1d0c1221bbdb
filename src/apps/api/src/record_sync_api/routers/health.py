"""Health check endpoint."""
import sqlite3

import structlog
from fastapi import APIRouter

from record_sync_core.db import get_conn

router = APIRouter(tags=["health"])
logger = structlog.get_logger()


@router.get("/health")
def health():
    """Health check, including whether the job store answers."""
    try:
        with get_conn() as conn:
            conn.execute("SELECT 1").fetchone()
        database = "ok"
    except (sqlite3.Error, OSError) as e:
        logger.warning("health_database_unavailable", error=str(e))
        database = "unavailable"
    return {"status": "ok" if database == "ok" else "degraded", "database": database}
