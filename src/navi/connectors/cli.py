"""Local CLI REPL connector — draws both axes as text and runs commands."""

from __future__ import annotations

import asyncio
import logging
import shlex
import sys
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from navi.tree.base import NavError

if TYPE_CHECKING:
    from navi.axis import AxisModel
    from navi.core import Navigator, NavView

logger = logging.getLogger(__name__)

HELP = """\
Spaces:    show | spaces | go N | in N | back | new [TITLE] | sub [TITLE] | rm
Journals:  journals | jgo N | jin N | jback | jnew TEMPLATE [INDEX] | jsub TEMPLATE [INDEX] | jrm
Other:     templates | history | help | exit"""


def format_axis(title: str, axis: AxisModel | None) -> str:
    if axis is None:
        return f"{title}: -"
    crumb = " / ".join(axis.path) if axis.path else "-"
    prev = "<" if axis.can_go_prev else " "
    lines = [f"{prev} {title}: {axis.label}   [{crumb}]"]
    if axis.children:
        lines.append(f"    {axis.children_count} below: " + ", ".join(c.label for c in axis.children))
    return "\n".join(lines)


def format_view(view: NavView | None) -> str:
    if view is None:
        return "(not started)"
    journal = view.journal_axis
    if journal is None or journal.active is None:
        journal_text = "  Journal: (none yet, use jnew TEMPLATE)"
    else:
        journal_text = format_axis("Journal", journal)
    return format_axis("Space", view.space_axis) + "\n" + journal_text


def _numbered(items) -> str:
    if not items:
        return "  (none)"
    return "\n".join(f"  {i}. {item.label}" for i, item in enumerate(items, start=1))


class CLIConnector:
    """Interactive REPL connector — reads from stdin, writes to stdout."""

    def __init__(self, out: Callable[[str], None] = print) -> None:
        self._running = False
        self._navigator: Navigator | None = None
        self._out = out

    @property
    def name(self) -> str:
        return "cli"

    def render(self, view: NavView) -> None:
        self._out(format_view(view))

    def attach(self, navigator: Navigator) -> None:
        self._navigator = navigator
        navigator.set_render_hook(self.render)

    async def start(self, navigator: Navigator) -> None:
        self.attach(navigator)
        self._running = True
        loop = asyncio.get_event_loop()

        self._out("navi (type 'help' for commands, 'exit' or Ctrl+C to quit)")
        self._out("-" * 48)
        await navigator.start()

        while self._running:
            try:
                line = await loop.run_in_executor(None, self._read_input)
            except (EOFError, KeyboardInterrupt):
                self._out("\nBye!")
                break
            if line is None:
                self._out("Bye!")
                break

            reply = await self.execute(line)
            if reply is None:
                self._out("Bye!")
                break
            if reply:
                self._out(reply)

    def _read_input(self) -> str | None:
        try:
            sys.stdout.write("\nnavi> ")
            sys.stdout.flush()
            raw = sys.stdin.buffer.readline()
            if not raw:
                return None
            return raw.decode("utf-8", errors="replace").rstrip("\n")
        except EOFError:
            return None

    async def stop(self) -> None:
        self._running = False

    # ── Command dispatch ──────────────────────────────────────

    async def execute(self, line: str) -> str | None:
        """Run one command line. Returns text to show, or None to quit."""
        if self._navigator is None:
            raise RuntimeError("Connector not started")
        try:
            parts = shlex.split(line)
        except ValueError as e:
            return f"Error: {e}"
        if not parts:
            return ""
        cmd, args = parts[0].lower(), parts[1:]
        if cmd in ("exit", "quit"):
            return None

        handler = getattr(self, f"_cmd_{cmd}", None)
        if handler is None:
            return f"Unknown command: {cmd} (try 'help')"
        try:
            return await handler(args)
        except NavError as e:
            logger.debug("Command %r failed: %s", line, e)
            return f"Error: {e}"
        except (ValueError, IndexError):
            return f"Usage error for '{cmd}' (try 'help')"

    def _view(self) -> NavView:
        view = self._navigator.view
        if view is None:
            raise NavError("Navigator not started")
        return view

    @staticmethod
    def _pick(items, args: list[str]):
        n = int(args[0])
        if n < 1:
            raise IndexError(n)
        return items[n - 1]

    async def _cmd_help(self, args: list[str]) -> str:
        return HELP

    async def _cmd_show(self, args: list[str]) -> str:
        return format_view(self._view())

    async def _cmd_spaces(self, args: list[str]) -> str:
        axis = self._view().space_axis
        return f"Siblings:\n{_numbered(axis.siblings)}\nChildren:\n{_numbered(axis.children)}"

    async def _cmd_journals(self, args: list[str]) -> str:
        axis = self._view().journal_axis
        return f"Siblings:\n{_numbered(axis.siblings)}\nChildren:\n{_numbered(axis.children)}"

    async def _cmd_go(self, args: list[str]) -> str:
        axis = self._view().space_axis
        item = self._pick(axis.siblings, args)
        await self._navigator.navigate_space(axis.path[:-1] + [item.id])
        return ""

    async def _cmd_in(self, args: list[str]) -> str:
        axis = self._view().space_axis
        item = self._pick(axis.children, args)
        await self._navigator.navigate_space(axis.path + [item.id])
        return ""

    async def _cmd_back(self, args: list[str]) -> str:
        if not self._view().space_axis.can_go_prev:
            return "Already at the top space level"
        await self._navigator.go_space_back()
        return ""

    async def _cmd_new(self, args: list[str]) -> str:
        axis = self._view().space_axis
        await self._navigator.create_sibling_space(axis.parent_id, " ".join(args))
        return ""

    async def _cmd_sub(self, args: list[str]) -> str:
        axis = self._view().space_axis
        await self._navigator.create_child_space(axis.active_id, " ".join(args))
        return ""

    async def _cmd_rm(self, args: list[str]) -> str:
        axis = self._view().space_axis
        if axis.active_id is None:
            return "No active space"
        label = axis.label
        await self._navigator.delete_space_subtree(axis.active_id)
        return f"Deleted {label}"

    async def _cmd_jgo(self, args: list[str]) -> str:
        axis = self._view().journal_axis
        item = self._pick(axis.siblings, args)
        await self._navigator.navigate_journal(axis.path[:-1] + [item.id])
        return ""

    async def _cmd_jin(self, args: list[str]) -> str:
        axis = self._view().journal_axis
        item = self._pick(axis.children, args)
        await self._navigator.navigate_journal(axis.path + [item.id])
        return ""

    async def _cmd_jback(self, args: list[str]) -> str:
        if not self._view().journal_axis.can_go_prev:
            return "Already at the top journal level"
        await self._navigator.go_journal_back()
        return ""

    async def _cmd_jnew(self, args: list[str]) -> str:
        view = self._view()
        template_id, index = args[0], " ".join(args[1:])
        sid = view.state.space_id
        axis = view.journal_axis
        parent_id = axis.parent_id if axis.active is not None else sid
        await self._navigator.create_level_journal(sid, parent_id, template_id, index)
        return ""

    async def _cmd_jsub(self, args: list[str]) -> str:
        axis = self._view().journal_axis
        template_id, index = args[0], " ".join(args[1:])
        await self._navigator.create_child_journal(axis.active_id, template_id, index)
        return ""

    async def _cmd_jrm(self, args: list[str]) -> str:
        axis = self._view().journal_axis
        if axis.active_id is None:
            return "No active journal"
        label = axis.label
        await self._navigator.delete_journal_subtree(axis.active_id)
        return f"Deleted {label}"

    async def _cmd_templates(self, args: list[str]) -> str:
        templates = self._navigator.list_templates()
        return "\n".join(f"  {t.id:<12} {t.title}" for t in templates)

    async def _cmd_history(self, args: list[str]) -> str:
        entries = await self._navigator.history()
        if not entries:
            return "(no history)"
        lines = []
        for e in entries[-10:]:
            ts = datetime.fromtimestamp(e.timestamp / 1000).strftime("%Y-%m-%d %H:%M:%S")
            lines.append(
                f"  [{ts}] space={'/'.join(e.cursor.space_path) or '-'} "
                f"journal={'/'.join(e.cursor.journal_path) or '-'}"
            )
        return "\n".join(lines)
