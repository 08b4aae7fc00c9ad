"""Tests for the axis model builder."""

from __future__ import annotations

from navi.axis import build_axis, build_journal_axis, build_space_axis, ordered
from navi.tree.journals import JournalNode, ParentRef
from navi.tree.spaces import SpaceNode


def space(id, title, parent=None, created=0, child_count=0) -> SpaceNode:
    return SpaceNode(id=id, title=title, parent_id=parent, child_count=child_count, created_at=created)


def journal(id, title, parent: ParentRef, space_id, created=0) -> JournalNode:
    return JournalNode(id=id, title=title, parent=parent, space_id=space_id, created_at=created)


class TestOrdering:
    def test_created_then_title(self):
        nodes = [
            space("c", "beta", created=2),
            space("b", "Alpha", created=2),
            space("a", "zeta", created=1),
        ]
        assert [n.id for n in ordered(nodes)] == ["a", "b", "c"]

    def test_title_tie_is_case_insensitive(self):
        nodes = [space("x", "banana", created=5), space("y", "Apple", created=5)]
        assert [n.id for n in ordered(nodes)] == ["y", "x"]

    def test_stable_under_unrelated_insert(self):
        nodes = [space("a", "A", created=1), space("b", "B", created=3), space("c", "C", created=3)]
        before = [n.id for n in ordered(nodes)]
        nodes.append(space("d", "D", created=10))
        nodes.append(space("e", "0", created=2))
        after = [n.id for n in ordered(nodes) if n.id in before]
        assert after == before


class TestSpaceAxis:
    def nodes(self):
        return [
            space("A", "A", created=1, child_count=1),
            space("B", "B", created=2),
            space("A1", "A1", parent="A", created=1),
        ]

    def test_label_numbering(self):
        model = build_space_axis(self.nodes(), ["A", "A1"])
        assert model.label == "1.1. A1"
        assert model.active_id == "A1"
        assert model.parent_id == "A"

    def test_empty_path_selects_first_root(self):
        model = build_space_axis(self.nodes(), [])
        assert model.active_id == "A"
        assert model.path == ["A"]
        assert model.label == "1. A"
        assert not model.can_go_prev
        assert model.parent_path == ["A"]

    def test_siblings_and_children(self):
        model = build_space_axis(self.nodes(), ["A"])
        assert [s.id for s in model.siblings] == ["A", "B"]
        assert [s.label for s in model.siblings] == ["1. A", "2. B"]
        assert [c.label for c in model.children] == ["1.1. A1"]
        assert model.children_count == 1
        assert model.siblings[0].child_count == 1

    def test_prev_affordance(self):
        model = build_space_axis(self.nodes(), ["A", "A1"])
        assert model.can_go_prev
        assert model.parent_path == ["A"]

    def test_empty_tree(self):
        model = build_space_axis([], [])
        assert model.active is None
        assert model.active_id is None
        assert model.path == []
        assert model.label == "Space"
        assert model.siblings == [] and model.children == []

    def test_unknown_active(self):
        model = build_space_axis(self.nodes(), ["ghost"])
        assert model.active is None
        assert model.label == "Space"

    def test_blank_title_uses_placeholder(self):
        model = build_space_axis([space("A", "", created=1)], ["A"])
        assert model.label == "1. Space"

    def test_cycle_does_not_hang(self):
        nodes = [space("x", "X", parent="y"), space("y", "Y", parent="x")]
        model = build_space_axis(nodes, ["x"])
        assert model.label.endswith("X")

    def test_does_not_mutate_input_path(self):
        path = ["A", "A1"]
        model = build_space_axis(self.nodes(), path)
        model.path.append("zzz")
        assert path == ["A", "A1"]


class TestJournalAxis:
    def nodes(self):
        return [
            journal("j1", "Incoming", ParentRef.space("S1"), "S1", created=1),
            journal("j2", "Orders", ParentRef.space("S1"), "S1", created=2),
            journal("j21", "2024", ParentRef.journal("j2"), "S1", created=3),
            journal("j22", "2025", ParentRef.journal("j2"), "S1", created=4),
            journal("k1", "Elsewhere", ParentRef.space("S2"), "S2", created=0),
        ]

    def test_scoped_to_space(self):
        model = build_journal_axis(self.nodes(), [], "S1")
        assert model.active_id == "j1"
        assert [s.id for s in model.siblings] == ["j1", "j2"]
        assert model.is_level1

    def test_label_stops_at_level1(self):
        model = build_journal_axis(self.nodes(), ["j2", "j21"], "S1")
        assert model.label == "2.1. 2024"
        assert model.parent_id == "j2"
        assert [s.label for s in model.siblings] == ["2.1. 2024", "2.2. 2025"]

    def test_level1_cannot_go_prev(self):
        model = build_journal_axis(self.nodes(), ["j21", "j2"], "S1")
        assert model.active_id == "j2"
        assert model.is_level1
        assert not model.can_go_prev

    def test_sub_journal_can_go_prev(self):
        model = build_journal_axis(self.nodes(), ["j2", "j22"], "S1")
        assert model.can_go_prev
        assert model.parent_path == ["j2"]
        assert not model.is_level1

    def test_children(self):
        model = build_journal_axis(self.nodes(), ["j2"], "S1")
        assert [c.id for c in model.children] == ["j21", "j22"]

    def test_empty_space(self):
        model = build_journal_axis(self.nodes(), [], "S9")
        assert model.active is None
        assert model.path == []
        assert model.label == "Journal"

    def test_other_space_ids_ignored(self):
        model = build_journal_axis(self.nodes(), ["k1"], "S1")
        assert model.active is None


class TestGenericBuilder:
    def test_prefiltered_nodes_with_scope(self):
        nodes = [journal("j1", "A", ParentRef.space("S1"), "S1", created=1)]
        model = build_axis(nodes, None, scope_id="S1", placeholder="Journal")
        assert model.path == ["j1"]
        assert model.label == "1. A"
