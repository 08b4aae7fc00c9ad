"""Persisted navigation cursor and bounded history log."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from navi.tree.base import now_ms

if TYPE_CHECKING:
    from navi.store.base import KeyValueStore

KEY_LAST_LOC = "nav_last_loc_v2"
KEY_HISTORY = "nav_history_v2"
MAX_HISTORY = 100


@dataclass(frozen=True)
class Cursor:
    """The dual-path location: outermost id first in each path."""

    space_path: tuple[str, ...] = ()
    journal_path: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"spacePath": list(self.space_path), "journalPath": list(self.journal_path)}


@dataclass(frozen=True)
class HistoryEntry:
    timestamp: int
    cursor: Cursor


def _path(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(v) for v in value if v)


def _cursor_from(data: Any) -> Cursor | None:
    if not isinstance(data, dict):
        return None
    return Cursor(_path(data.get("spacePath")), _path(data.get("journalPath")))


class CursorStore:
    """Reads and writes the last location and the navigation history."""

    def __init__(self, kv: KeyValueStore, history_limit: int = MAX_HISTORY) -> None:
        self._kv = kv
        self.history_limit = max(1, history_limit)

    def _clamp(self, entries: list) -> list:
        if len(entries) <= self.history_limit:
            return entries
        return entries[len(entries) - self.history_limit :]

    async def load(self) -> Cursor | None:
        return _cursor_from(await self._kv.get(KEY_LAST_LOC))

    async def save(self, cursor: Cursor) -> None:
        await self._kv.set(KEY_LAST_LOC, cursor.to_dict())

    async def push(self, cursor: Cursor, timestamp: int | None = None) -> None:
        """Append a timestamped snapshot, evicting the oldest past the limit."""
        raw = await self._kv.get(KEY_HISTORY)
        entries = raw if isinstance(raw, list) else []
        entries.append({"t": timestamp if timestamp is not None else now_ms(), **cursor.to_dict()})
        await self._kv.set(KEY_HISTORY, self._clamp(entries))

    async def history(self) -> list[HistoryEntry]:
        raw = await self._kv.get(KEY_HISTORY)
        if not isinstance(raw, list):
            return []
        out = []
        for item in self._clamp(raw):
            cursor = _cursor_from(item)
            if cursor is not None:
                out.append(HistoryEntry(timestamp=int(item.get("t") or 0), cursor=cursor))
        return out
