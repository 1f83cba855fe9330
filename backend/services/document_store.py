"""
Calibration Tracker - Document Store
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): None-valued fields stripped recursively before writes
v1.0.0 (2026-10-05): JSON documents in SQLite with in-process change subscriptions

Each collection is a set of JSON records keyed by an opaque id. Subscribers
receive the full collection snapshot once on subscribe and again after every
write to that collection. Concurrent writers are not coordinated: the last
write to an id wins.
"""

import inspect
import logging
from collections import defaultdict
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import aiosqlite

from database import get_db, fetch_one, fetch_all, execute_write, dump_document, load_document
from services.errors import StoreError

logger = logging.getLogger(__name__)

Listener = Callable[[List[Dict[str, Any]]], Any]


def remove_none_fields(value):
    """Drop dict keys whose value is None, at every nesting level"""
    if isinstance(value, dict):
        return {k: remove_none_fields(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [remove_none_fields(item) for item in value]
    return value


class DocumentStore:
    """SQLite-backed document collections"""

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    async def list(self, collection: str) -> List[Dict[str, Any]]:
        """All records of a collection, oldest first, each with its 'id'"""
        try:
            async with get_db() as db:
                rows = await fetch_all(
                    db,
                    "SELECT id, data FROM documents WHERE collection = ? ORDER BY created_at, rowid",
                    (collection,)
                )
        except (aiosqlite.Error, OSError) as e:
            logger.error(f"Failed to read collection '{collection}': {e}")
            raise StoreError(f"Failed to read collection '{collection}'") from e
        return [self._to_record(row) for row in rows]

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            async with get_db() as db:
                row = await fetch_one(
                    db,
                    "SELECT id, data FROM documents WHERE collection = ? AND id = ?",
                    (collection, doc_id)
                )
        except (aiosqlite.Error, OSError) as e:
            logger.error(f"Failed to read {collection}/{doc_id}: {e}")
            raise StoreError(f"Failed to read {collection}/{doc_id}") from e
        return self._to_record(row) if row else None

    async def upsert(self, collection: str, doc_id: str, record: Dict[str, Any]) -> None:
        """Create or replace a record. None-valued fields are not persisted."""
        data = remove_none_fields(dict(record))
        data.pop("id", None)
        now = datetime.now().isoformat()
        try:
            async with get_db() as db:
                await execute_write(db, """
                    INSERT INTO documents (collection, id, data, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(collection, id) DO UPDATE SET
                        data = excluded.data,
                        updated_at = excluded.updated_at
                """, (collection, doc_id, dump_document(data), now, now))
        except (aiosqlite.Error, OSError) as e:
            logger.error(f"Failed to write {collection}/{doc_id}: {e}")
            raise StoreError(f"Failed to write {collection}/{doc_id}") from e

        logger.debug(f"Upserted {collection}/{doc_id}")
        await self._notify(collection)

    async def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a record; returns False when it did not exist"""
        try:
            async with get_db() as db:
                deleted = await execute_write(
                    db,
                    "DELETE FROM documents WHERE collection = ? AND id = ?",
                    (collection, doc_id)
                )
        except (aiosqlite.Error, OSError) as e:
            logger.error(f"Failed to delete {collection}/{doc_id}: {e}")
            raise StoreError(f"Failed to delete {collection}/{doc_id}") from e

        if deleted:
            logger.debug(f"Deleted {collection}/{doc_id}")
            await self._notify(collection)
        return bool(deleted)

    async def subscribe(self, collection: str, on_change: Listener) -> Callable[[], None]:
        """
        Register a listener for a collection.

        The listener is called immediately with the current snapshot, then
        after every write. Returns an unsubscribe function.
        """
        self._listeners[collection].append(on_change)
        await self._deliver(on_change, await self.list(collection))

        def unsubscribe():
            listeners = self._listeners.get(collection, [])
            if on_change in listeners:
                listeners.remove(on_change)

        return unsubscribe

    async def _notify(self, collection: str):
        listeners = list(self._listeners.get(collection, []))
        if not listeners:
            return
        snapshot = await self.list(collection)
        for listener in listeners:
            await self._deliver(listener, snapshot)

    async def _deliver(self, listener: Listener, snapshot: List[Dict[str, Any]]):
        try:
            result = listener(snapshot)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            # One broken listener must not fail the write that triggered it
            logger.error(f"Store listener {listener!r} failed: {e}", exc_info=True)

    @staticmethod
    def _to_record(row: dict) -> Dict[str, Any]:
        data = load_document(row["data"])
        return {"id": row["id"], **data}


# Singleton instance
document_store = DocumentStore()
