"""In-process store for tests and throwaway sessions."""

from __future__ import annotations

import copy
from typing import Any


class InMemoryStore:
    """Dict-backed store. Values are deep-copied in and out so callers never share state."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Any | None:
        value = self._data.get(str(key))
        return copy.deepcopy(value)

    async def set(self, key: str, value: Any) -> None:
        self._data[str(key)] = copy.deepcopy(value)

    def keys(self) -> list[str]:
        return list(self._data)
