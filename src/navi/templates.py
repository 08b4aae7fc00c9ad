"""Journal template catalog.

Templates only supply a display title (and an optional description) when
a journal is created. The built-in set can be extended or overridden by a
directory of markdown files with YAML frontmatter:

    ---
    id: tmpl_contracts
    title: Contracts
    ---
    Signed contracts and amendments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import frontmatter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JournalTemplate:
    id: str
    title: str
    description: str = ""


DEFAULT_TEMPLATES = (
    JournalTemplate("tmpl_in", "Incoming"),
    JournalTemplate("tmpl_out", "Outgoing"),
    JournalTemplate("tmpl_ord", "Orders"),
    JournalTemplate("tmpl_req", "Requests"),
    JournalTemplate("tmpl_act", "Acts"),
    JournalTemplate("tmpl_note", "Memos"),
    JournalTemplate("tmpl_misc", "Other"),
)


class TemplateCatalog:
    """Ordered, id-addressable set of journal templates."""

    def __init__(self, templates: list[JournalTemplate] | tuple[JournalTemplate, ...]) -> None:
        self._templates: dict[str, JournalTemplate] = {}
        for t in templates:
            self._templates[t.id] = t

    @classmethod
    def default(cls) -> TemplateCatalog:
        return cls(DEFAULT_TEMPLATES)

    @classmethod
    def from_directory(cls, directory: Path) -> TemplateCatalog:
        """Built-in templates overlaid with every *.md template in directory."""
        catalog = cls.default()
        if not directory.is_dir():
            logger.warning("Template directory not found: %s", directory)
            return catalog
        for md_file in sorted(directory.glob("*.md")):
            template = cls._parse(md_file)
            if template:
                catalog._templates[template.id] = template
        return catalog

    @staticmethod
    def _parse(md_file: Path) -> JournalTemplate | None:
        try:
            post = frontmatter.load(str(md_file))
        except Exception as e:
            logger.warning("Skipping unreadable template %s: %s", md_file, e)
            return None
        meta = dict(post.metadata)
        tid = str(meta.get("id") or md_file.stem).strip()
        title = str(meta.get("title") or "").strip() or tid
        return JournalTemplate(tid, title, post.content.strip())

    def list(self) -> list[JournalTemplate]:
        return list(self._templates.values())

    def get_by_id(self, template_id: str | None) -> JournalTemplate | None:
        return self._templates.get(str(template_id or ""))
