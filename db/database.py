import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from .schema import SCHEMA_SQL, INDEXES_SQL, SCHEMA_VERSION

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".quickrevise"
DB_PATH = CONFIG_DIR / "quickrevise.db"


def init_db():
    """Initialize the database by creating tables and indexes if they don't exist."""
    CONFIG_DIR.mkdir(exist_ok=True)
    with get_conn() as conn:
        conn.executescript(SCHEMA_SQL)
        conn.executescript(INDEXES_SQL)
        ensure_user_names(conn)
        ensure_feedback_response(conn)
        ensure_schema_version(conn)
        conn.commit()
    logger.info("Database ready at %s (schema v%s)", DB_PATH, SCHEMA_VERSION)


def ensure_user_names(conn: sqlite3.Connection) -> None:
    """Ensure users table has first/last name columns for existing installs."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA table_info(users)")
    columns = {row[1] for row in cursor.fetchall()}
    if "first_name" not in columns:
        cursor.execute("ALTER TABLE users ADD COLUMN first_name TEXT")
    if "last_name" not in columns:
        cursor.execute("ALTER TABLE users ADD COLUMN last_name TEXT")


def ensure_feedback_response(conn: sqlite3.Connection) -> None:
    """Ensure feedbacks table has admin response columns."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA table_info(feedbacks)")
    columns = {row[1] for row in cursor.fetchall()}
    if "admin_response" not in columns:
        cursor.execute("ALTER TABLE feedbacks ADD COLUMN admin_response TEXT")
    if "reviewed_at" not in columns:
        cursor.execute("ALTER TABLE feedbacks ADD COLUMN reviewed_at TEXT")


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the SQLite schema version from PRAGMA user_version."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA user_version")
    row = cursor.fetchone()
    return int(row[0]) if row else 0


def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Set the SQLite schema version via PRAGMA user_version."""
    conn.execute(f"PRAGMA user_version = {int(version)}")


def ensure_schema_version(conn: sqlite3.Connection) -> None:
    """Ensure the current schema version is written to the database."""
    current = get_schema_version(conn)
    if current != SCHEMA_VERSION:
        logger.info("Migrating schema version %s -> %s", current, SCHEMA_VERSION)
        set_schema_version(conn, SCHEMA_VERSION)


@contextmanager
def get_conn():
    """Context manager for SQLite connection, using row_factory for dict-like rows."""
    conn = sqlite3.connect(DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


def get_db():
    """FastAPI dependency that yields a DB connection and closes it afterwards."""
    with get_conn() as conn:
        yield conn
