"""Database connection management."""
import sqlite3
import os
from contextlib import contextmanager
from typing import Iterator
from ..config import DB_PATH


def get_connection(read_only: bool = False) -> sqlite3.Connection:
    """
    Create and return a database connection.

    Read-only connections never create the database file and fail
    with sqlite3.OperationalError when it is missing.
    """
    if read_only:
        conn = sqlite3.connect(f"file:{DB_PATH}?mode=ro", uri=True)
    else:
        conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(read_only: bool = False) -> Iterator[sqlite3.Cursor]:
    """Context manager for database operations."""
    conn = get_connection(read_only)
    try:
        cursor = conn.cursor()
        yield cursor
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def db_exists() -> bool:
    return os.path.exists(DB_PATH)


def schema_exists() -> bool:
    """Return True if the database file holds the usage tables."""
    if not db_exists():
        return False
    try:
        with get_cursor(read_only=True) as cur:
            cur.execute("""
                SELECT COUNT(*) FROM sqlite_master
                WHERE type = 'table' AND name IN ('usage_stats', 'app_labels')
            """)
            return cur.fetchone()[0] == 2
    except sqlite3.DatabaseError:
        return False


def ensure_db_exists() -> None:
    """Ensure database directory and tables exist."""
    directory = os.path.dirname(DB_PATH)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with get_cursor() as cur:
        cur.execute("""
            CREATE TABLE IF NOT EXISTS usage_stats (
                id INTEGER PRIMARY KEY,
                package_name TEXT NOT NULL,
                begin_ms INTEGER NOT NULL,
                end_ms INTEGER NOT NULL,
                foreground_ms INTEGER NOT NULL DEFAULT 0
            )
        """)
        cur.execute("""
            CREATE INDEX IF NOT EXISTS idx_usage_stats_begin
            ON usage_stats(begin_ms)
        """)
        cur.execute("""
            CREATE INDEX IF NOT EXISTS idx_usage_stats_package
            ON usage_stats(package_name)
        """)
        cur.execute("""
            CREATE TABLE IF NOT EXISTS app_labels (
                package_name TEXT PRIMARY KEY,
                label TEXT NOT NULL
            )
        """)
