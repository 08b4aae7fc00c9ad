"""Key-value persistence backends."""

from __future__ import annotations

from navi.store.base import KeyValueStore
from navi.store.json_file import JsonFileStore
from navi.store.memory import InMemoryStore

__all__ = ["InMemoryStore", "JsonFileStore", "KeyValueStore"]
