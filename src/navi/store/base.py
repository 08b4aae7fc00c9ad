"""Key-value store protocol."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol that all persistence backends must implement.

    Values are JSON-compatible (dicts, lists, strings, numbers, None).
    Each ``set`` replaces the whole value for its key atomically.
    """

    async def get(self, key: str) -> Any | None:
        """Return the stored value, or None if the key was never set."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Store a value under key, replacing any previous value."""
        ...
