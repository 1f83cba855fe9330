"""
Calibration Tracker - SQLite Access Layer
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Document JSON codec; corrupt rows logged instead of silently dropped
v1.0.0 (2026-10-05): Connection context manager and query helpers

Every caller opens a short-lived connection per operation, so nothing here
holds state between requests. The database file comes from
settings.SQLITE_DB_PATH on each call.
"""

import json
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import aiosqlite

from config import settings

logger = logging.getLogger(__name__)


def get_db_path() -> str:
    """Configured database file; its directory is created on demand"""
    db_path = settings.SQLITE_DB_PATH
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    return db_path


@asynccontextmanager
async def get_db():
    """Connection with dict-like rows, WAL journal and cascading foreign keys"""
    db = await aiosqlite.connect(get_db_path())
    db.row_factory = aiosqlite.Row
    await db.execute("PRAGMA journal_mode=WAL")
    await db.execute("PRAGMA foreign_keys=ON")
    try:
        yield db
    finally:
        await db.close()


async def fetch_one(db, sql: str, params=()) -> Optional[Dict[str, Any]]:
    cursor = await db.execute(sql, params)
    row = await cursor.fetchone()
    return dict(row) if row else None


async def fetch_all(db, sql: str, params=()) -> List[Dict[str, Any]]:
    cursor = await db.execute(sql, params)
    return [dict(row) for row in await cursor.fetchall()]


async def execute_write(db, sql: str, params=()) -> int:
    """Run one write statement and commit; returns the affected row count"""
    cursor = await db.execute(sql, params)
    await db.commit()
    return cursor.rowcount


# -- Document codec (documents.data column) --

def dump_document(data: Dict[str, Any]) -> str:
    """Record body as JSON text; dates and other non-JSON values via str()"""
    return json.dumps(data or {}, default=str, ensure_ascii=False)


def load_document(text: Optional[str]) -> Dict[str, Any]:
    """JSON text back to a record body; unreadable bodies load as {}"""
    if not text:
        return {}
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Unreadable document body: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Document body is {type(data).__name__}, expected object")
        return {}
    return data
