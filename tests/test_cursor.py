"""Tests for cursor + history persistence."""

from __future__ import annotations

import pytest

from navi.cursor import KEY_HISTORY, KEY_LAST_LOC, Cursor, CursorStore
from navi.store.memory import InMemoryStore


class TestCursor:
    @pytest.mark.asyncio
    async def test_load_empty(self, kv: InMemoryStore):
        assert await CursorStore(kv).load() is None

    @pytest.mark.asyncio
    async def test_round_trip(self, kv: InMemoryStore):
        store = CursorStore(kv)
        cursor = Cursor(("S1", "S2"), ("J1",))
        await store.save(cursor)
        assert await store.load() == cursor
        assert await kv.get(KEY_LAST_LOC) == {"spacePath": ["S1", "S2"], "journalPath": ["J1"]}

    @pytest.mark.asyncio
    async def test_malformed_values(self, kv: InMemoryStore):
        store = CursorStore(kv)
        await kv.set(KEY_LAST_LOC, "junk")
        assert await store.load() is None
        await kv.set(KEY_LAST_LOC, {"spacePath": "S1", "journalPath": ["J1", None, ""]})
        assert await store.load() == Cursor((), ("J1",))


class TestHistory:
    @pytest.mark.asyncio
    async def test_push_and_read(self, kv: InMemoryStore):
        store = CursorStore(kv)
        await store.push(Cursor(("S1",), ()), timestamp=10)
        await store.push(Cursor(("S1", "S2"), ("J1",)), timestamp=20)
        entries = await store.history()
        assert [e.timestamp for e in entries] == [10, 20]
        assert entries[1].cursor == Cursor(("S1", "S2"), ("J1",))
        raw = await kv.get(KEY_HISTORY)
        assert raw[0] == {"t": 10, "spacePath": ["S1"], "journalPath": []}

    @pytest.mark.asyncio
    async def test_oldest_evicted(self, kv: InMemoryStore):
        store = CursorStore(kv, history_limit=3)
        for i in range(5):
            await store.push(Cursor((f"S{i}",), ()), timestamp=i)
        entries = await store.history()
        assert [e.timestamp for e in entries] == [2, 3, 4]
        assert len(await kv.get(KEY_HISTORY)) == 3

    @pytest.mark.asyncio
    async def test_default_limit_is_100(self, kv: InMemoryStore):
        store = CursorStore(kv)
        for i in range(105):
            await store.push(Cursor(("S",), ()), timestamp=i)
        entries = await store.history()
        assert len(entries) == 100
        assert entries[0].timestamp == 5

    @pytest.mark.asyncio
    async def test_garbage_history(self, kv: InMemoryStore):
        store = CursorStore(kv)
        await kv.set(KEY_HISTORY, {"not": "a list"})
        assert await store.history() == []
        await store.push(Cursor(("S1",), ()), timestamp=1)
        await kv.set(KEY_HISTORY, ["junk", {"t": 2, "spacePath": ["S2"], "journalPath": []}])
        entries = await store.history()
        assert [e.cursor.space_path for e in entries] == [("S2",)]
