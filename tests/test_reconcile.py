"""Tests for selection reconciliation."""

from jnode.graph import GraphStore, NodeData
from jnode.reconcile import find_node_by_path, paths_equal, reselect


class TestFindNodeByPath:
    NODES = [
        NodeData("1", ()),
        NodeData("2", ("a",)),
        NodeData("3", ("a", 0)),
    ]

    def test_match(self):
        assert find_node_by_path(self.NODES, ("a", 0)).id == "3"

    def test_root(self):
        assert find_node_by_path(self.NODES, ()).id == "1"

    def test_list_path(self):
        assert find_node_by_path(self.NODES, ["a"]).id == "2"

    def test_no_match(self):
        assert find_node_by_path(self.NODES, ("b",)) is None

    def test_segment_types_must_match(self):
        assert find_node_by_path(self.NODES, ("a", False)) is None
        assert find_node_by_path(self.NODES, ("a", "0")) is None

    def test_order_matters(self):
        assert not paths_equal(("a", "b"), ("b", "a"))


class TestReselect:

    def test_sets_selection_on_match(self):
        store = GraphStore()
        store.rebuild('{"a": {"b": 1}}')
        match = reselect(store, ("a",))
        assert match is not None
        assert store.current_selection() is match

    def test_miss_leaves_selection(self):
        store = GraphStore()
        store.rebuild('{"a": {"b": 1}}')
        current = store.all_nodes()[0]
        store.set_selection(current)
        assert reselect(store, ("zzz",)) is None
        assert store.current_selection() is current
