"""
Calibration Tracker - Database Models
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): auth_sessions table; users.email uniqueness
v1.0.0 (2026-10-05): Initial schema: generic documents table (device store),
                      users
"""

from .calibration import Calibration, CalibrationCreate
from .device import Device, DeviceCreate
from .status import DeviceStatus, SortKey, SortDirection, SortConfig, DashboardStats, ChartBucket
from .report import ReportRow
from .user import User, UserRole

import aiosqlite
import logging

logger = logging.getLogger(__name__)


async def init_db():
    """Initialize SQLite database schema"""
    from database import get_db_path
    db_path = get_db_path()
    logger.info(f"Initializing database: {db_path}")

    async with aiosqlite.connect(db_path) as db:
        await db.execute("PRAGMA journal_mode=WAL")
        await db.execute("PRAGMA foreign_keys=ON")

        # ================================================================
        # DOCUMENTS (JSON records keyed by collection + id)
        # ================================================================
        await db.execute("""
            CREATE TABLE IF NOT EXISTS documents (
                collection TEXT NOT NULL,
                id TEXT NOT NULL,
                data TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (collection, id)
            )
        """)

        # ================================================================
        # USERS
        # ================================================================
        await db.execute("""
            CREATE TABLE IF NOT EXISTS users (
                uid TEXT PRIMARY KEY,
                email TEXT UNIQUE NOT NULL,
                username TEXT NOT NULL,
                role TEXT NOT NULL DEFAULT 'User',
                password_hash TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # ================================================================
        # AUTH SESSIONS (opaque bearer tokens)
        # ================================================================
        await db.execute("""
            CREATE TABLE IF NOT EXISTS auth_sessions (
                token TEXT PRIMARY KEY,
                uid TEXT NOT NULL REFERENCES users(uid) ON DELETE CASCADE,
                created_at TIMESTAMP NOT NULL,
                expires_at TIMESTAMP NOT NULL
            )
        """)

        await db.execute("CREATE INDEX IF NOT EXISTS idx_docs_collection ON documents(collection)")
        await db.execute("CREATE INDEX IF NOT EXISTS idx_sessions_uid ON auth_sessions(uid)")

        await db.commit()

    logger.info("Database initialized successfully")


__all__ = [
    'Calibration', 'CalibrationCreate',
    'Device', 'DeviceCreate',
    'DeviceStatus', 'SortKey', 'SortDirection', 'SortConfig',
    'DashboardStats', 'ChartBucket',
    'ReportRow',
    'User', 'UserRole',
    'init_db'
]
