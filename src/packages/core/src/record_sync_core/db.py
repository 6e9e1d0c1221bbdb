"""SQLite connection handling shared by the job and connection stores."""
import os
import sqlite3
from contextlib import contextmanager

SCHEMA = """
CREATE TABLE IF NOT EXISTS jobs (
    job_id TEXT PRIMARY KEY,
    target_id TEXT NOT NULL,
    resource_type TEXT NOT NULL,
    status TEXT NOT NULL,
    total_records INTEGER NOT NULL DEFAULT 0,
    processed_records INTEGER NOT NULL DEFAULT 0,
    success_count INTEGER NOT NULL DEFAULT 0,
    error_count INTEGER NOT NULL DEFAULT 0,
    source_label TEXT,
    operation TEXT NOT NULL,
    external_id_field TEXT,
    creator TEXT,
    created_at TEXT NOT NULL,
    completed_at TEXT
);
CREATE INDEX IF NOT EXISTS ix_jobs_target_created ON jobs (target_id, created_at);

CREATE TABLE IF NOT EXISTS job_errors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    job_id TEXT NOT NULL REFERENCES jobs (job_id) ON DELETE CASCADE,
    row_number INTEGER NOT NULL,
    error_message TEXT NOT NULL,
    raw_data TEXT NOT NULL,
    UNIQUE (job_id, row_number)
);

CREATE TABLE IF NOT EXISTS connections (
    target_id TEXT PRIMARY KEY,
    base_url TEXT NOT NULL,
    api_version TEXT NOT NULL,
    access_token TEXT NOT NULL,
    refresh_token TEXT,
    token_url TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


def _get_sqlite_path() -> str:
    return os.environ.get("SQLITE_PATH", "/data/jobs.db")


@contextmanager
def get_conn():
    """Get a database connection. Commits on success, rolls back on error."""
    path = _get_sqlite_path()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    conn = sqlite3.connect(path, timeout=30)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        conn.executescript(SCHEMA)
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db():
    """Initialize the database."""
    with get_conn():
        pass
