"""Tests for the journal template catalog."""

from __future__ import annotations

from pathlib import Path

from navi.templates import TemplateCatalog


class TestDefaults:
    def test_builtin_templates(self):
        catalog = TemplateCatalog.default()
        ids = [t.id for t in catalog.list()]
        assert ids == [
            "tmpl_in",
            "tmpl_out",
            "tmpl_ord",
            "tmpl_req",
            "tmpl_act",
            "tmpl_note",
            "tmpl_misc",
        ]

    def test_get_by_id(self):
        catalog = TemplateCatalog.default()
        assert catalog.get_by_id("tmpl_ord").title == "Orders"
        assert catalog.get_by_id("nope") is None
        assert catalog.get_by_id(None) is None

    def test_list_is_a_copy(self):
        catalog = TemplateCatalog.default()
        catalog.list().clear()
        assert len(catalog.list()) == 7


class TestFromDirectory:
    def test_overlay(self, tmp_path: Path):
        (tmp_path / "contracts.md").write_text(
            "---\nid: tmpl_contracts\ntitle: Contracts\n---\nSigned contracts.\n",
            encoding="utf-8",
        )
        (tmp_path / "incoming.md").write_text(
            "---\nid: tmpl_in\ntitle: Inbox\n---\n", encoding="utf-8"
        )
        catalog = TemplateCatalog.from_directory(tmp_path)
        contracts = catalog.get_by_id("tmpl_contracts")
        assert contracts.title == "Contracts"
        assert contracts.description == "Signed contracts."
        assert catalog.get_by_id("tmpl_in").title == "Inbox"
        assert len(catalog.list()) == 8

    def test_id_defaults_to_stem(self, tmp_path: Path):
        (tmp_path / "minutes.md").write_text("---\ntitle: Minutes\n---\n", encoding="utf-8")
        (tmp_path / "bare.md").write_text("no frontmatter", encoding="utf-8")
        catalog = TemplateCatalog.from_directory(tmp_path)
        assert catalog.get_by_id("minutes").title == "Minutes"
        assert catalog.get_by_id("bare").title == "bare"

    def test_broken_file_skipped(self, tmp_path: Path):
        (tmp_path / "broken.md").write_text("---\ntitle: [unclosed\n---\n", encoding="utf-8")
        catalog = TemplateCatalog.from_directory(tmp_path)
        assert catalog.get_by_id("broken") is None
        assert len(catalog.list()) == 7

    def test_missing_directory(self, tmp_path: Path):
        catalog = TemplateCatalog.from_directory(tmp_path / "absent")
        assert len(catalog.list()) == 7
