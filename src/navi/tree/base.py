"""Generic flat-list tree store and shared error types.

A tree is one list of node dicts stored under a single key. Every
operation loads the whole list, mutates it in memory and writes it back,
so the store never holds state between calls.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from navi.store.base import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"


class NavError(Exception):
    """Base class for tree and navigation failures."""


class NotFound(NavError):
    """A parent or node id does not resolve to an existing node."""


class HasChildren(NavError):
    """Single delete attempted on a node that still has children."""


class InvalidArgument(NavError):
    """A required id was missing from a create/delete call."""


class IntegrityError(NavError):
    """Stored data violates an ownership invariant."""


def now_ms() -> int:
    return int(time.time() * 1000)


def clean_title(title: Any) -> str:
    """Trim a user-supplied title, falling back to a placeholder."""
    text = "" if title is None else str(title).strip()
    return text or DEFAULT_TITLE


N = TypeVar("N")


class TreeStore(Generic[N]):
    """Read-modify-write CRUD over one tree persisted as a flat list.

    Subclasses define how nodes map to/from dicts and which id (if any)
    is a node's parent *inside this tree*. Parents outside the tree (the
    synthetic root, or a Space for level-1 journals) never carry a
    ``child_count`` here.
    """

    key: str = ""
    id_prefix: str = "N"

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        clock: Callable[[], int] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._kv = kv
        self._clock = clock or now_ms
        self._id_factory = id_factory

    # ── Subclass hooks ────────────────────────────────────────

    def _from_dict(self, data: dict) -> N:
        raise NotImplementedError

    def _to_dict(self, node: N) -> dict:
        raise NotImplementedError

    def _tree_parent(self, node: N) -> str | None:
        """Parent id inside this tree, or None for a top-level node."""
        raise NotImplementedError

    # ── Persistence ───────────────────────────────────────────

    def _new_id(self) -> str:
        if self._id_factory:
            return self._id_factory()
        return f"{self.id_prefix}_{uuid.uuid4().hex[:16]}"

    async def _load(self) -> list[N]:
        raw = await self._kv.get(self.key)
        if not isinstance(raw, list):
            return []
        return [self._from_dict(item) for item in raw if isinstance(item, dict) and item.get("id")]

    async def _save(self, nodes: list[N]) -> None:
        await self._kv.set(self.key, [self._to_dict(n) for n in nodes])

    @staticmethod
    def _index(nodes: list[N], node_id: str) -> int:
        for i, n in enumerate(nodes):
            if n.id == node_id:
                return i
        return -1

    def _recount(self, nodes: Iterable[N]) -> None:
        """Rebuild every node's child_count from the list itself."""
        nodes = list(nodes)
        counts = {n.id: 0 for n in nodes}
        for n in nodes:
            pid = self._tree_parent(n)
            if pid is not None and pid in counts:
                counts[pid] += 1
        for n in nodes:
            n.child_count = counts[n.id]

    # ── Queries ───────────────────────────────────────────────

    async def list_all(self) -> list[N]:
        return await self._load()

    async def get(self, node_id: str) -> N | None:
        nodes = await self._load()
        i = self._index(nodes, node_id)
        return nodes[i] if i >= 0 else None

    async def list_children(self, parent_id: str) -> list[N]:
        nodes = await self._load()
        return [n for n in nodes if n.parent_id == parent_id]

    # ── Mutations ─────────────────────────────────────────────

    async def _append_child(self, node: N, parent_id: str) -> N:
        """Append node under an in-tree parent, bumping its child_count."""
        nodes = await self._load()
        pi = self._index(nodes, parent_id)
        if pi < 0:
            raise NotFound(f"Parent '{parent_id}' not found in {self.key}")
        self._check_parent(nodes, nodes[pi], node)
        nodes.append(node)
        nodes[pi].child_count += 1
        await self._save(nodes)
        logger.info("Created %s under %s in %s", node.id, parent_id, self.key)
        return node

    def _check_parent(self, nodes: list[N], parent: N, child: N) -> None:
        """Hook for subclasses to verify invariants before a child is written."""

    async def _append(self, node: N) -> N:
        nodes = await self._load()
        nodes.append(node)
        await self._save(nodes)
        logger.info("Created %s in %s", node.id, self.key)
        return node

    async def delete(self, node_id: str) -> bool:
        """Delete a leaf node. Returns False if it does not exist."""
        if not node_id:
            raise InvalidArgument("id is required")
        nodes = await self._load()
        i = self._index(nodes, node_id)
        if i < 0:
            return False
        node = nodes[i]
        if node.child_count > 0:
            raise HasChildren(f"'{node_id}' has {node.child_count} children")
        del nodes[i]
        pid = self._tree_parent(node)
        if pid is not None:
            pi = self._index(nodes, pid)
            if pi >= 0:
                nodes[pi].child_count = max(0, nodes[pi].child_count - 1)
        await self._save(nodes)
        logger.info("Deleted %s from %s", node_id, self.key)
        return True

    async def delete_subtree(self, root_id: str) -> set[str]:
        """Delete root_id and every descendant. Returns the deleted ids.

        An empty set means the root did not exist; nothing is written.
        """
        if not root_id:
            raise InvalidArgument("id is required")
        nodes = await self._load()
        if self._index(nodes, root_id) < 0:
            return set()

        by_parent: dict[str, list[str]] = {}
        for n in nodes:
            pid = self._tree_parent(n)
            if pid is not None:
                by_parent.setdefault(pid, []).append(n.id)

        doomed: set[str] = set()
        stack = [root_id]
        while stack:
            cur = stack.pop()
            if cur in doomed:
                continue
            doomed.add(cur)
            stack.extend(by_parent.get(cur, []))

        kept = [n for n in nodes if n.id not in doomed]
        self._recount(kept)
        await self._save(kept)
        logger.info("Deleted subtree %s from %s (%d nodes)", root_id, self.key, len(doomed))
        return doomed
