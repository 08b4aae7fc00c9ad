"""Space tree — the primary hierarchy. Root spaces have no parent."""

from __future__ import annotations

from dataclasses import dataclass

from navi.tree.base import InvalidArgument, TreeStore, clean_title

KEY_SPACES = "spaces_nodes_v2"


@dataclass
class SpaceNode:
    """A node in the Space tree."""

    id: str
    title: str
    parent_id: str | None = None
    child_count: int = 0
    created_at: int = 0

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


class SpaceTree(TreeStore[SpaceNode]):
    """CRUD over the Space tree."""

    key = KEY_SPACES
    id_prefix = "S"

    def _from_dict(self, data: dict) -> SpaceNode:
        parent = data.get("parentId")
        return SpaceNode(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            parent_id=str(parent) if parent else None,
            child_count=int(data.get("childCount") or 0),
            created_at=int(data.get("createdAt") or 0),
        )

    def _to_dict(self, node: SpaceNode) -> dict:
        return {
            "id": node.id,
            "title": node.title,
            "parentId": node.parent_id,
            "childCount": node.child_count,
            "createdAt": node.created_at,
        }

    def _tree_parent(self, node: SpaceNode) -> str | None:
        return node.parent_id

    async def list_roots(self) -> list[SpaceNode]:
        nodes = await self._load()
        return [n for n in nodes if n.is_root]

    async def create_root(self, title: str | None) -> SpaceNode:
        node = SpaceNode(id=self._new_id(), title=clean_title(title), created_at=self._clock())
        return await self._append(node)

    async def create_child(self, parent_id: str, title: str | None) -> SpaceNode:
        if not parent_id:
            raise InvalidArgument("parent_id is required")
        node = SpaceNode(
            id=self._new_id(),
            title=clean_title(title),
            parent_id=str(parent_id),
            created_at=self._clock(),
        )
        return await self._append_child(node, str(parent_id))
