"""Navigator — the orchestrator between the tree stores and presentation.

Responsibilities:
1. Hold the dual-path cursor (Space path + Journal path) as an immutable state object
2. Run each command as a transition: state in → store mutations → new state out
3. Persist the cursor and append a history entry after every successful transition
4. Reload both trees, repair stale paths, rebuild both axis models
5. Hand the resulting view to the render hook
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from navi.axis import (
    JOURNAL_PLACEHOLDER,
    AxisModel,
    build_journal_axis,
    build_space_axis,
    ordered,
)
from navi.config import NavigationConfig
from navi.cursor import Cursor, CursorStore, HistoryEntry
from navi.templates import JournalTemplate, TemplateCatalog
from navi.tree.base import IntegrityError, InvalidArgument, NotFound, now_ms
from navi.tree.journals import JournalNode, JournalTree
from navi.tree.spaces import SpaceNode, SpaceTree

if TYPE_CHECKING:
    from navi.store.base import KeyValueStore

logger = logging.getLogger(__name__)

NEW_SPACE_TITLE = "New space"
NEW_SUBSPACE_TITLE = "New subspace"


@dataclass(frozen=True)
class NavState:
    """Where the user is: one path per tree, outermost id first."""

    space_path: tuple[str, ...] = ()
    journal_path: tuple[str, ...] = ()

    @property
    def space_id(self) -> str | None:
        return self.space_path[-1] if self.space_path else None

    def to_cursor(self) -> Cursor:
        return Cursor(self.space_path, self.journal_path)


@dataclass
class NavView:
    """Everything presentation needs to draw both axes."""

    state: NavState
    space_nodes: list[SpaceNode] = field(default_factory=list)
    journal_nodes: list[JournalNode] = field(default_factory=list)
    space_axis: AxisModel | None = None
    journal_axis: AxisModel | None = None


RenderHook = Callable[[NavView], "Awaitable[None] | None"]
Transition = Callable[[NavState], Awaitable[NavState]]


def _splice(path: tuple[str, ...], parent_id: str, new_id: str) -> tuple[str, ...]:
    """Cut path just after parent_id and append new_id; restart if parent is off-path."""
    if parent_id in path:
        return path[: path.index(parent_id) + 1] + (new_id,)
    return (new_id,)


def _valid_prefix(path: Sequence[str], known: set[str]) -> tuple[str, ...]:
    out: list[str] = []
    for node_id in path:
        if node_id not in known:
            break
        out.append(node_id)
    return tuple(out)


class Navigator:
    """Core orchestrator — sequences tree mutations and keeps both paths valid."""

    def __init__(
        self,
        kv: KeyValueStore,
        templates: TemplateCatalog | None = None,
        config: NavigationConfig | None = None,
        on_render: RenderHook | None = None,
        *,
        clock: Callable[[], int] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.config = config or NavigationConfig()
        self.templates = templates or TemplateCatalog.default()
        self.spaces = SpaceTree(kv, clock=clock, id_factory=id_factory)
        self.journals = JournalTree(kv, clock=clock, id_factory=id_factory)
        self.cursor = CursorStore(kv, history_limit=self.config.history_limit)
        self.state = NavState()
        self.view: NavView | None = None
        self._on_render = on_render
        self._clock = clock or now_ms

    # ── Lifecycle ─────────────────────────────────────────────

    async def ensure_defaults(self) -> None:
        """Create a root space if none exists."""
        roots = await self.spaces.list_roots()
        if not roots:
            node = await self.spaces.create_root(self.config.default_space_title)
            logger.info("Created default root space %s", node.id)

    async def start(self) -> NavView:
        """Ensure a root space, restore the persisted cursor, render."""
        await self.ensure_defaults()
        saved = await self.cursor.load()
        if saved is not None:
            self.state = NavState(saved.space_path, saved.journal_path)
            logger.debug("Restored cursor %s", saved)
        return await self.refresh()

    def set_render_hook(self, on_render: RenderHook | None) -> None:
        self._on_render = on_render

    # ── Presentation accessors ────────────────────────────────

    def get_state(self) -> dict[str, Any]:
        view = self.view
        return {
            "space_nodes": list(view.space_nodes) if view else [],
            "journal_nodes": list(view.journal_nodes) if view else [],
            "space_path": list(self.state.space_path),
            "journal_path": list(self.state.journal_path),
            "space_id": self.state.space_id,
        }

    def list_templates(self) -> list[JournalTemplate]:
        return self.templates.list()

    async def history(self) -> list[HistoryEntry]:
        return await self.cursor.history()

    # ── Snapshot + repair ─────────────────────────────────────

    def _repair(
        self,
        state: NavState,
        space_nodes: list[SpaceNode],
        journal_nodes: list[JournalNode],
    ) -> NavState:
        """Truncate each path at its first stale id; fall back to the first root space."""
        space_path = _valid_prefix(state.space_path, {n.id for n in space_nodes})
        if not space_path:
            roots = ordered(n for n in space_nodes if n.is_root)
            space_path = (roots[0].id,) if roots else ()
        space_id = space_path[-1] if space_path else None
        in_space = {j.id for j in journal_nodes if j.space_id == space_id}
        journal_path = _valid_prefix(state.journal_path, in_space)

        repaired = NavState(space_path, journal_path)
        if repaired != state:
            logger.debug("Repaired cursor %s -> %s", state, repaired)
        return repaired

    async def refresh(self) -> NavView:
        """Reload both trees, repair paths, rebuild axis models, render."""
        space_nodes = await self.spaces.list_all()
        journal_nodes = await self.journals.list_all()
        self.state = self._repair(self.state, space_nodes, journal_nodes)

        view = NavView(
            state=self.state,
            space_nodes=space_nodes,
            journal_nodes=journal_nodes,
            space_axis=build_space_axis(space_nodes, self.state.space_path),
            journal_axis=build_journal_axis(
                journal_nodes, self.state.journal_path, self.state.space_id
            ),
        )
        self.view = view
        await self._render(view)
        return view

    async def _render(self, view: NavView) -> None:
        if self._on_render is None:
            return
        result = self._on_render(view)
        if inspect.isawaitable(result):
            await result

    # ── Transition plumbing ───────────────────────────────────

    async def _commit(self, transition: Transition) -> NavView:
        """Run a transition; persist cursor + history only if it succeeds."""
        new_state = await transition(self.state)
        cursor = new_state.to_cursor()
        await self.cursor.save(cursor)
        try:
            await self.cursor.push(cursor, self._clock())
        except Exception:
            logger.warning("Failed to append navigation history", exc_info=True)
        self.state = new_state
        return await self.refresh()

    def _journal_title(self, template_id: str | None, index: str | None) -> str:
        template = self.templates.get_by_id(template_id)
        base = template.title if template else JOURNAL_PLACEHOLDER
        idx = str(index).strip() if index is not None else ""
        return f"{base} ({idx})" if idx else base

    async def _journal_chain(self, journal_id: str) -> tuple[str, ...]:
        """Path from the level-1 ancestor down to journal_id."""
        by_id = {j.id: j for j in await self.journals.list_all()}
        chain: list[str] = []
        cur = by_id.get(journal_id)
        while cur is not None and cur.id not in chain:
            chain.append(cur.id)
            if cur.is_level1:
                break
            cur = by_id.get(cur.parent.id)
        chain.reverse()
        return tuple(chain)

    async def _require_space(self, space_id: str) -> None:
        if await self.spaces.get(space_id) is None:
            raise NotFound(f"Space '{space_id}' not found")

    # ── Space commands ────────────────────────────────────────

    async def navigate_space(self, path: Sequence[str] | None) -> NavView:
        async def transition(state: NavState) -> NavState:
            # Journal paths are per-space; never carry one across
            return NavState(space_path=tuple(path or ()), journal_path=())

        return await self._commit(transition)

    async def go_space_back(self) -> NavView:
        view = self.view or await self.refresh()
        if not view.space_axis or not view.space_axis.can_go_prev:
            return view
        return await self.navigate_space(view.space_axis.parent_path)

    async def create_sibling_space(self, parent_id: str | None, title: str | None) -> NavView:
        name = (title or "").strip() or NEW_SPACE_TITLE

        async def transition(state: NavState) -> NavState:
            if not parent_id:
                node = await self.spaces.create_root(name)
                return NavState(space_path=(node.id,))
            node = await self.spaces.create_child(parent_id, name)
            return NavState(space_path=_splice(state.space_path, parent_id, node.id))

        return await self._commit(transition)

    async def create_child_space(self, parent_id: str | None, title: str | None) -> NavView:
        name = (title or "").strip() or NEW_SUBSPACE_TITLE

        async def transition(state: NavState) -> NavState:
            if not parent_id:
                raise InvalidArgument("parent_id is required")
            node = await self.spaces.create_child(parent_id, name)
            return NavState(space_path=state.space_path + (node.id,))

        return await self._commit(transition)

    async def delete_space_subtree(self, space_id: str | None) -> NavView:
        async def transition(state: NavState) -> NavState:
            if not space_id:
                raise InvalidArgument("space_id is required")
            deleted = await self.spaces.delete_subtree(space_id)
            if deleted:
                removed = await self.journals.delete_by_owner(deleted)
                logger.info(
                    "Space subtree %s removed %d spaces and %d journals",
                    space_id,
                    len(deleted),
                    removed,
                )
            return NavState()

        return await self._commit(transition)

    # ── Journal commands ──────────────────────────────────────

    async def navigate_journal(self, path: Sequence[str] | None) -> NavView:
        async def transition(state: NavState) -> NavState:
            return replace(state, journal_path=tuple(path or ()))

        return await self._commit(transition)

    async def go_journal_back(self) -> NavView:
        view = self.view or await self.refresh()
        if not view.journal_axis or not view.journal_axis.can_go_prev:
            return view
        return await self.navigate_journal(view.journal_axis.parent_path)

    async def create_level_journal(
        self,
        space_id: str | None,
        parent_id: str | None,
        template_id: str | None,
        index: str | None = None,
    ) -> NavView:
        """Add a journal next to the active one: level-1 when parent_id is the space."""
        title = self._journal_title(template_id, index)

        async def transition(state: NavState) -> NavState:
            sid = str(space_id or state.space_id or "")
            pid = str(parent_id or "")
            if not sid:
                raise InvalidArgument("space_id is required")
            if not pid:
                raise InvalidArgument("parent_id is required")
            if pid == sid:
                await self._require_space(sid)
                node = await self.journals.create_level1(sid, title, template_id or "")
                return replace(state, journal_path=(node.id,))
            parent = await self.journals.get(pid)
            if parent is None:
                raise NotFound(f"Journal '{pid}' not found")
            if parent.space_id != sid:
                raise IntegrityError(
                    f"Journal '{pid}' belongs to space '{parent.space_id}', not '{sid}'"
                )
            node = await self.journals.create_child(pid, title, template_id or "")
            if pid in state.journal_path:
                return replace(state, journal_path=_splice(state.journal_path, pid, node.id))
            chain = await self._journal_chain(pid)
            return replace(state, journal_path=chain + (node.id,))

        return await self._commit(transition)

    async def create_child_journal(
        self,
        active_journal_id: str | None,
        template_id: str | None,
        index: str | None = None,
    ) -> NavView:
        """Add a journal under the active one, or a first level-1 journal."""
        title = self._journal_title(template_id, index)

        async def transition(state: NavState) -> NavState:
            if not active_journal_id:
                sid = state.space_id
                if not sid:
                    raise InvalidArgument("No active space to attach a journal to")
                await self._require_space(sid)
                node = await self.journals.create_level1(sid, title, template_id or "")
                return replace(state, journal_path=(node.id,))
            node = await self.journals.create_child(active_journal_id, title, template_id or "")
            if state.journal_path and state.journal_path[-1] == active_journal_id:
                base = state.journal_path
            else:
                base = await self._journal_chain(active_journal_id)
            return replace(state, journal_path=base + (node.id,))

        return await self._commit(transition)

    async def delete_journal_subtree(self, journal_id: str | None) -> NavView:
        async def transition(state: NavState) -> NavState:
            if not journal_id:
                raise InvalidArgument("journal_id is required")
            await self.journals.delete_subtree(journal_id)
            return replace(state, journal_path=())

        return await self._commit(transition)
