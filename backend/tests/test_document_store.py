"""SQLite document store: replace semantics, None stripping, subscriptions."""

import asyncio
from datetime import date

import pytest

from database import dump_document, load_document
from services.document_store import DocumentStore, remove_none_fields


@pytest.fixture()
def store(temp_db):
    return DocumentStore()


def test_remove_none_fields_recurses():
    record = {"a": 1, "b": None, "nested": {"c": None, "d": [{"e": None, "f": 2}]}}
    assert remove_none_fields(record) == {"a": 1, "nested": {"d": [{"f": 2}]}}


def test_upsert_and_get(store):
    async def scenario():
        await store.upsert("devices", "d1", {"id": "d1", "name": "Scale", "photo_data": None})
        return await store.get("devices", "d1")

    record = asyncio.run(scenario())
    assert record == {"id": "d1", "name": "Scale"}


def test_upsert_replaces_whole_record(store):
    async def scenario():
        await store.upsert("devices", "d1", {"name": "Scale", "usage": "Lab"})
        await store.upsert("devices", "d1", {"name": "Scale 2"})
        return await store.list("devices")

    records = asyncio.run(scenario())
    assert records == [{"id": "d1", "name": "Scale 2"}]


def test_list_is_per_collection_and_ordered(store):
    async def scenario():
        await store.upsert("devices", "b", {"n": 1})
        await store.upsert("devices", "a", {"n": 2})
        await store.upsert("other", "x", {"n": 3})
        return await store.list("devices")

    assert [r["id"] for r in asyncio.run(scenario())] == ["b", "a"]


def test_delete(store):
    async def scenario():
        await store.upsert("devices", "d1", {"name": "Scale"})
        first = await store.delete("devices", "d1")
        second = await store.delete("devices", "d1")
        return first, second, await store.get("devices", "d1")

    assert asyncio.run(scenario()) == (True, False, None)


def test_subscribe_gets_snapshot_then_updates(store):
    snapshots = []

    async def scenario():
        await store.upsert("devices", "d1", {"name": "Scale"})
        unsubscribe = await store.subscribe("devices", snapshots.append)
        await store.upsert("devices", "d2", {"name": "Meter"})
        unsubscribe()
        await store.delete("devices", "d1")

    asyncio.run(scenario())
    assert [len(s) for s in snapshots] == [1, 2]


def test_async_listener_supported(store):
    seen = []

    async def listener(snapshot):
        seen.append([r["id"] for r in snapshot])

    async def scenario():
        await store.subscribe("devices", listener)
        await store.upsert("devices", "d1", {"name": "Scale"})

    asyncio.run(scenario())
    assert seen == [[], ["d1"]]


def test_failing_listener_does_not_fail_write(store):
    def broken(snapshot):
        if snapshot:
            raise RuntimeError("boom")

    async def scenario():
        await store.subscribe("devices", broken)
        await store.upsert("devices", "d1", {"name": "Scale"})
        return await store.get("devices", "d1")

    assert asyncio.run(scenario())["name"] == "Scale"


def test_document_codec():
    text = dump_document({"name": "Váha", "when": date(2024, 1, 10)})
    assert "Váha" in text
    assert load_document(text) == {"name": "Váha", "when": "2024-01-10"}
    assert load_document("not json") == {}
    assert load_document("[1, 2]") == {}
    assert load_document(None) == {}
