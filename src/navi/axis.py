"""Axis model builder — flat node list + path → breadcrumb view model.

Pure functions, no IO. The same builder serves both trees: Spaces use
``None`` as the top-level parent, Journals use the owning Space's id.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

SPACE_PLACEHOLDER = "Space"
JOURNAL_PLACEHOLDER = "Journal"


@dataclass
class AxisItem:
    """One navigable entry (sibling or child) on an axis."""

    id: str
    label: str
    child_count: int = 0


@dataclass
class AxisModel:
    """Computed view of one tree at one path."""

    path: list[str]
    active_id: str | None
    active: Any | None
    parent_id: str | None
    label: str
    siblings: list[AxisItem] = field(default_factory=list)
    children: list[AxisItem] = field(default_factory=list)
    can_go_prev: bool = False
    parent_path: list[str] = field(default_factory=list)
    is_level1: bool = False

    @property
    def children_count(self) -> int:
        return len(self.children)


def sort_key(node: Any) -> tuple:
    """Creation order first, then case-insensitive title, then id."""
    title = node.title or ""
    return (node.created_at or 0, title.casefold(), title, node.id)


def ordered(nodes: Iterable[Any]) -> list[Any]:
    return sorted(nodes, key=sort_key)


class _Numbering:
    """Sibling positions and hierarchical labels for one node set."""

    def __init__(self, nodes: list[Any], scope_id: str | None, placeholder: str) -> None:
        self.scope_id = scope_id
        self.placeholder = placeholder
        self.by_id = {n.id: n for n in nodes}
        self.groups: dict[str | None, list[Any]] = {}
        for n in nodes:
            self.groups.setdefault(n.parent_id, []).append(n)
        self.position: dict[str, int] = {}
        for group in self.groups.values():
            group.sort(key=sort_key)
            for i, n in enumerate(group, start=1):
                self.position[n.id] = i

    def group(self, parent_id: str | None) -> list[Any]:
        return self.groups.get(parent_id, [])

    def numbers(self, node_id: str) -> list[int]:
        out: list[int] = []
        seen: set[str] = set()
        cur = self.by_id.get(node_id)
        while cur is not None and cur.id not in seen:
            seen.add(cur.id)
            out.append(self.position.get(cur.id, 1))
            if cur.parent_id == self.scope_id:
                break
            cur = self.by_id.get(cur.parent_id) if cur.parent_id is not None else None
        out.reverse()
        return out

    def label(self, node: Any | None) -> str:
        if node is None:
            return self.placeholder
        title = node.title or self.placeholder
        nums = self.numbers(node.id)
        if not nums:
            return title
        return ".".join(str(n) for n in nums) + ". " + title

    def item(self, node: Any) -> AxisItem:
        return AxisItem(id=node.id, label=self.label(node), child_count=node.child_count)


def build_axis(
    nodes: Iterable[Any],
    path: Sequence[str] | None,
    *,
    scope_id: str | None = None,
    placeholder: str = SPACE_PLACEHOLDER,
) -> AxisModel:
    """Build the axis model for ``path`` over ``nodes``.

    ``scope_id`` is the parent id of top-level nodes: ``None`` for Spaces,
    the Space id for Journals. An empty path selects the first top-level
    node and the returned path becomes ``[that id]``.
    """
    all_nodes = [n for n in nodes if n is not None]
    numbering = _Numbering(all_nodes, scope_id, placeholder)
    path = list(path or [])

    active_id = path[-1] if path else None
    if active_id is None:
        top = numbering.group(scope_id)
        if top:
            active_id = top[0].id
            path = [active_id]

    active = numbering.by_id.get(active_id) if active_id else None
    parent_id = active.parent_id if active is not None else None
    is_level1 = scope_id is not None and active is not None and parent_id == scope_id

    siblings = numbering.group(parent_id) if active is not None else []
    children = numbering.group(active_id) if active_id else []

    can_go_prev = len(path) > 1
    if scope_id is not None and is_level1:
        can_go_prev = False

    return AxisModel(
        path=path,
        active_id=active_id,
        active=active,
        parent_id=parent_id,
        label=numbering.label(active),
        siblings=[numbering.item(n) for n in siblings],
        children=[numbering.item(n) for n in children],
        can_go_prev=can_go_prev,
        parent_path=path[:-1] if len(path) > 1 else list(path),
        is_level1=is_level1,
    )


def build_space_axis(space_nodes: Iterable[Any], space_path: Sequence[str] | None) -> AxisModel:
    return build_axis(space_nodes, space_path, placeholder=SPACE_PLACEHOLDER)


def build_journal_axis(
    journal_nodes: Iterable[Any],
    journal_path: Sequence[str] | None,
    space_id: str | None,
) -> AxisModel:
    """Journal axis for one Space. Journals of other Spaces are ignored."""
    sid = str(space_id or "")
    scoped = [j for j in journal_nodes if j is not None and j.space_id == sid]
    return build_axis(scoped, journal_path, scope_id=sid, placeholder=JOURNAL_PLACEHOLDER)
