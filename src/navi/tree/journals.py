"""Journal tree — the secondary hierarchy, always owned by a Space.

A journal's parent is either a Space (a "level-1" journal) or another
journal. The two cases are kept apart with an explicit ``ParentRef``
instead of guessing from the shape of the id.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from navi.tree.base import IntegrityError, InvalidArgument, TreeStore, clean_title

logger = logging.getLogger(__name__)

KEY_JOURNALS = "journals_nodes_v2"

ParentKind = Literal["space", "journal"]


@dataclass(frozen=True)
class ParentRef:
    """Tagged parent reference: a Space id or a Journal id."""

    kind: ParentKind
    id: str

    @classmethod
    def space(cls, space_id: str) -> ParentRef:
        return cls("space", str(space_id))

    @classmethod
    def journal(cls, journal_id: str) -> ParentRef:
        return cls("journal", str(journal_id))


@dataclass
class JournalNode:
    """A node in the Journal tree."""

    id: str
    title: str
    parent: ParentRef
    space_id: str
    template_id: str = ""
    child_count: int = 0
    created_at: int = 0

    @property
    def parent_id(self) -> str:
        return self.parent.id

    @property
    def is_level1(self) -> bool:
        return self.parent.kind == "space"


class JournalTree(TreeStore[JournalNode]):
    """CRUD over the Journal tree."""

    key = KEY_JOURNALS
    id_prefix = "J"

    def _from_dict(self, data: dict) -> JournalNode:
        parent_id = str(data.get("parentId") or "")
        space_id = str(data.get("spaceId") or "")
        kind = data.get("parentKind")
        if kind not in ("space", "journal"):
            # Records written before parentKind existed
            kind = "space" if parent_id == space_id else "journal"
        return JournalNode(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            parent=ParentRef(kind, parent_id),
            space_id=space_id,
            template_id=str(data.get("templateId") or ""),
            child_count=int(data.get("childCount") or 0),
            created_at=int(data.get("createdAt") or 0),
        )

    def _to_dict(self, node: JournalNode) -> dict:
        return {
            "id": node.id,
            "title": node.title,
            "templateId": node.template_id,
            "parentKind": node.parent.kind,
            "parentId": node.parent.id,
            "spaceId": node.space_id,
            "childCount": node.child_count,
            "createdAt": node.created_at,
        }

    def _tree_parent(self, node: JournalNode) -> str | None:
        return node.parent.id if node.parent.kind == "journal" else None

    def _check_parent(self, nodes: list[JournalNode], parent: JournalNode, child: JournalNode) -> None:
        """The parent's chain must reach a level-1 journal of the same space."""
        by_id = {n.id: n for n in nodes}
        seen: set[str] = set()
        cur: JournalNode | None = parent
        while cur is not None:
            if cur.id in seen:
                raise IntegrityError(f"Cycle in journal ancestry at '{cur.id}'")
            seen.add(cur.id)
            if cur.space_id != child.space_id:
                raise IntegrityError(
                    f"Journal '{cur.id}' belongs to space '{cur.space_id}', "
                    f"expected '{child.space_id}'"
                )
            if cur.is_level1:
                if cur.parent.id != child.space_id:
                    raise IntegrityError(
                        f"Level-1 journal '{cur.id}' is attached to '{cur.parent.id}' "
                        f"but owned by '{cur.space_id}'"
                    )
                return
            cur = by_id.get(cur.parent.id)
        raise IntegrityError(f"Journal '{parent.id}' has a broken ancestry chain")

    # ── Queries ───────────────────────────────────────────────

    async def list_level1(self, space_id: str) -> list[JournalNode]:
        space_id = str(space_id)
        nodes = await self._load()
        return [n for n in nodes if n.is_level1 and n.parent.id == space_id]

    async def list_for_space(self, space_id: str) -> list[JournalNode]:
        space_id = str(space_id)
        nodes = await self._load()
        return [n for n in nodes if n.space_id == space_id]

    # ── Mutations ─────────────────────────────────────────────

    async def create_level1(
        self, space_id: str, title: str | None, template_id: str = ""
    ) -> JournalNode:
        """Create a journal attached directly to a Space."""
        if not space_id:
            raise InvalidArgument("space_id is required")
        node = JournalNode(
            id=self._new_id(),
            title=clean_title(title),
            parent=ParentRef.space(space_id),
            space_id=str(space_id),
            template_id=str(template_id or ""),
            created_at=self._clock(),
        )
        return await self._append(node)

    async def create_child(
        self, parent_id: str, title: str | None, template_id: str = ""
    ) -> JournalNode:
        """Create a sub-journal; it inherits the parent's space."""
        if not parent_id:
            raise InvalidArgument("parent_id is required")
        parent = await self.get(str(parent_id))
        # space_id is copied from the parent; _append_child re-reads and verifies the chain
        space_id = parent.space_id if parent else ""
        node = JournalNode(
            id=self._new_id(),
            title=clean_title(title),
            parent=ParentRef.journal(parent_id),
            space_id=space_id,
            template_id=str(template_id or ""),
            created_at=self._clock(),
        )
        return await self._append_child(node, str(parent_id))

    async def delete_by_owner(self, space_ids: Iterable[str]) -> int:
        """Remove every journal owned by one of space_ids. Returns the count removed."""
        owners = {str(s) for s in space_ids}
        if not owners:
            return 0
        nodes = await self._load()
        kept = [n for n in nodes if n.space_id not in owners]
        removed = len(nodes) - len(kept)
        self._recount(kept)
        await self._save(kept)
        logger.info("Deleted %d journals owned by %d spaces", removed, len(owners))
        return removed
