"""Shared fixtures: deterministic clocks and ids, in-memory store."""

from __future__ import annotations

import itertools

import pytest

from navi.store.memory import InMemoryStore


class Ticker:
    """Monotonic fake clock: every call is one millisecond later."""

    def __init__(self, start: int = 1000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


class IdSeq:
    def __init__(self, prefix: str = "n") -> None:
        self._counter = itertools.count(1)
        self._prefix = prefix

    def __call__(self) -> str:
        return f"{self._prefix}{next(self._counter)}"


@pytest.fixture
def kv() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def clock() -> Ticker:
    return Ticker()


@pytest.fixture
def ids() -> IdSeq:
    return IdSeq()
