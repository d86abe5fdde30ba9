"""Tests for the node set builder and the selection store."""

import json

from jnode.document import DocumentStore, TextBuffer
from jnode.graph import GraphStore, NodeData, build_nodes
from jnode.rows import Row, RowType

USER_DOC = '{"user":{"name":"Al","age":1,"tags":["x"]}}'


class TestBuildNodes:

    def test_object_document(self):
        nodes = build_nodes(json.loads(USER_DOC))
        assert nodes == [
            NodeData("1", (), (Row("user", 3, RowType.OBJECT),)),
            NodeData(
                "2",
                ("user",),
                (
                    Row("name", "Al"),
                    Row("age", 1),
                    Row("tags", 1, RowType.ARRAY),
                ),
            ),
            NodeData("3", ("user", "tags", 0), (Row(None, "x"),)),
        ]

    def test_root_array(self):
        nodes = build_nodes([1, [2]])
        assert [n.path for n in nodes] == [(), (0,), (1,), (1, 0)]
        assert nodes[0].rows == ()
        assert nodes[1].rows == (Row(None, 1),)
        assert nodes[3].rows == (Row(None, 2),)

    def test_root_scalar(self):
        assert build_nodes(5) == [NodeData("1", (), (Row(None, 5),))]

    def test_array_of_objects(self):
        nodes = build_nodes({"items": [{"id": 1}, {"id": 2}]})
        assert [n.path for n in nodes] == [(), ("items", 0), ("items", 1)]
        assert nodes[2].rows == (Row("id", 2),)

    def test_every_path_resolves_once(self):
        data = json.loads(USER_DOC)
        paths = [n.path for n in build_nodes(data)]
        assert len(paths) == len(set(paths))


class TestGraphStore:

    def test_rebuild(self):
        store = GraphStore()
        assert store.rebuild(USER_DOC) is True
        assert len(store.all_nodes()) == 3

    def test_rebuild_invalid_keeps_nodes(self):
        store = GraphStore()
        store.rebuild(USER_DOC)
        before = store.all_nodes()
        assert store.rebuild("{broken") is False
        assert store.all_nodes() == before

    def test_selection_listeners(self):
        store = GraphStore()
        store.rebuild(USER_DOC)
        seen = []
        unsubscribe = store.subscribe(seen.append)
        node = store.all_nodes()[1]
        store.set_selection(node)
        assert store.current_selection() is node
        unsubscribe()
        store.set_selection(None)
        assert seen == [node]


class TestDocumentStore:

    def test_replace_notifies_in_order(self):
        store = DocumentStore("{}")
        calls = []
        store.subscribe(lambda text: calls.append(("first", text)))
        store.subscribe(lambda text: calls.append(("second", store.read_text())))
        store.replace_text("[1]")
        assert calls == [("first", "[1]"), ("second", "[1]")]

    def test_buffer_follows_store(self):
        store = DocumentStore("{}")
        buffer = TextBuffer("{}")
        buffer.set_contents("{ }", dirty=True)
        buffer.follow(store)
        store.replace_text("[1]")
        assert buffer.contents == "[1]"
        assert buffer.has_changes is False

    def test_unsubscribe(self):
        store = DocumentStore("{}")
        calls = []
        unsubscribe = store.subscribe(calls.append)
        unsubscribe()
        store.replace_text("[]")
        assert calls == []
