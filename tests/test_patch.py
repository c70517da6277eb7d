"""Tests for path mutation, graph building and resynchronization."""

import json

import pytest

from nodeedit._fragment import FieldRow, FieldType
from nodeedit._jsonpath import (
    PathError,
    get_value_at_path,
    paths_equal,
    set_value_at_path,
)
from nodeedit.graph import (
    Graph,
    GraphNode,
    GraphStore,
    build_graph,
    find_node,
    node_id_for,
)
from nodeedit.resync import ResyncError, relocate_selection, resynchronize


class TestSetValueAtPath:
    """경로에 값 쓰기 테스트."""

    def test_creates_objects(self):
        doc = {}
        set_value_at_path(doc, ["a", "b"], 1)
        assert doc == {"a": {"b": 1}}

    def test_creates_array_for_index(self):
        doc = {}
        set_value_at_path(doc, ["a", 0], "x")
        assert doc == {"a": ["x"]}

    def test_container_kind_follows_next_segment(self):
        doc = {}
        set_value_at_path(doc, ["a", 0, "b", 1], True)
        assert doc == {"a": [{"b": [None, True]}]}

    def test_replaces_null_intermediate(self):
        doc = {"a": None}
        set_value_at_path(doc, ["a", "b"], 2)
        assert doc == {"a": {"b": 2}}

    def test_overwrites_container(self):
        doc = {"a": {"b": [1, 2, 3]}}
        set_value_at_path(doc, ["a", "b"], "flat")
        assert doc == {"a": {"b": "flat"}}

    def test_keeps_siblings(self):
        doc = {"a": {"b": 1, "c": [1, 2]}}
        set_value_at_path(doc, ["a", "b"], 5)
        assert doc == {"a": {"b": 5, "c": [1, 2]}}

    def test_pads_array(self):
        doc = {"a": []}
        set_value_at_path(doc, ["a", 2], 1)
        assert doc == {"a": [None, None, 1]}

    def test_int_key_on_object(self):
        doc = {"a": {}}
        set_value_at_path(doc, ["a", 0], 1)
        assert doc == {"a": {"0": 1}}

    def test_idempotent(self):
        once = {"x": [1]}
        twice = {"x": [1]}
        set_value_at_path(once, ["x", 3, "y"], {"z": 1})
        set_value_at_path(twice, ["x", 3, "y"], {"z": 1})
        set_value_at_path(twice, ["x", 3, "y"], {"z": 1})
        assert once == twice

    def test_root_array(self):
        doc = [1, 2]
        set_value_at_path(doc, [1], 9)
        assert doc == [1, 9]

    def test_empty_path_rejected(self):
        with pytest.raises(PathError):
            set_value_at_path({}, [], 1)

    def test_string_key_on_array_rejected(self):
        with pytest.raises(PathError):
            set_value_at_path({"a": [1]}, ["a", "b"], 1)

    def test_negative_index_rejected(self):
        with pytest.raises(PathError):
            set_value_at_path([1], [-1], 1)

    def test_descend_into_scalar_rejected(self):
        with pytest.raises(PathError):
            set_value_at_path({"a": "text"}, ["a", "b", "c"], 1)

    def test_path_error_is_value_error(self):
        assert issubclass(PathError, ValueError)


class TestGetValueAtPath:
    def test_found(self):
        assert get_value_at_path({"a": [{"b": 2}]}, ["a", 0, "b"]) == 2

    def test_missing(self):
        assert get_value_at_path({"a": [1]}, ["a", 5]) is None
        assert get_value_at_path({"a": 1}, ["b"]) is None

    def test_root(self):
        assert get_value_at_path([1], []) == [1]


class TestPathsEqual:
    def test_equal(self):
        assert paths_equal(["a", 0], ["a", 0])

    def test_type_sensitive(self):
        assert not paths_equal(["a", 0], ["a", "0"])
        assert not paths_equal([True], [1])

    def test_length(self):
        assert not paths_equal(["a"], ["a", 0])

    def test_none(self):
        assert not paths_equal(None, [])
        assert paths_equal([], [])


class TestBuildGraph:
    """JSON 문서 -> graph node 변환 테스트."""

    def test_object_rows(self):
        graph = build_graph({"name": "Ann", "age": 30, "tags": ["a"]})
        root = graph.nodes[0]
        assert root.id == "[]"
        assert root.path == []
        assert root.text == [
            FieldRow("name", "Ann", FieldType.STRING),
            FieldRow("age", 30, FieldType.NUMBER),
            FieldRow("tags", 1, FieldType.ARRAY),
        ]

    def test_array_items_hang_off_parent(self):
        graph = build_graph({"tags": ["a", "b"]})
        paths = [node.path for node in graph.nodes]
        assert paths == [[], ["tags", 0], ["tags", 1]]
        assert graph.nodes[1].text == [FieldRow(None, "a", FieldType.STRING)]
        assert [(e.source, e.target) for e in graph.edges] == [
            ("[]", '["tags", 0]'),
            ("[]", '["tags", 1]'),
        ]

    def test_nested_object_node(self):
        graph = build_graph({"customer": {"name": "Ann"}})
        node = find_node(graph.nodes, path=["customer"])
        assert node is not None
        assert node.text == [FieldRow("name", "Ann", FieldType.STRING)]

    def test_nested_arrays_flattened(self):
        graph = build_graph([[1, 2], [3]])
        assert [node.path for node in graph.nodes] == [[0, 0], [0, 1], [1, 0]]

    def test_scalar_document(self):
        graph = build_graph("hello")
        assert len(graph.nodes) == 1
        assert graph.nodes[0].path == []
        assert graph.nodes[0].text == [FieldRow(None, "hello", FieldType.STRING)]

    def test_empty_object(self):
        graph = build_graph({"a": {}})
        assert find_node(graph.nodes, path=["a"]).text == []

    def test_ids_follow_path(self):
        graph = build_graph({"a": {"b": {}}, "c": [1]})
        assert [node.id for node in graph.nodes] == [
            "[]",
            '["a"]',
            '["a", "b"]',
            '["c", 0]',
        ]
        assert all(node.id == node_id_for(node.path) for node in graph.nodes)

    def test_id_keeps_index_and_key_apart(self):
        assert node_id_for([0]) != node_id_for(["0"])
        assert node_id_for(['a"b']) != node_id_for(["a", "b"])

    def test_ids_survive_shape_change_elsewhere(self):
        before = build_graph({"a": {"x": 1}, "b": {"y": 2}})
        after = build_graph({"a": [], "b": {"y": 2}})
        b_before = find_node(before.nodes, path=["b"])
        b_after = find_node(after.nodes, path=["b"])
        assert b_before.id == b_after.id
        assert find_node(after.nodes, node_id=node_id_for(["a"])) is None

    def test_same_shape_same_ids(self):
        before = build_graph({"a": {"b": 1}, "c": [1, 2]})
        after = build_graph({"a": {"b": 99}, "c": [1, 5]})
        assert [(n.id, n.path) for n in before.nodes] == [
            (n.id, n.path) for n in after.nodes
        ]


class TestGraphStore:
    def test_set_graph(self):
        store = GraphStore()
        store.set_graph('{"a": [1, 2]}')
        assert len(store.nodes) == 3
        assert len(store.edges) == 2

    def test_initial_raw(self):
        store = GraphStore('{"a": 1}')
        assert store.nodes[0].text == [FieldRow("a", 1, FieldType.NUMBER)]

    def test_select(self):
        store = GraphStore('{"a": 1}')
        store.set_selected_node(store.nodes[0])
        assert store.selected_node is store.nodes[0]
        store.set_selected_node(None)
        assert store.selected_node is None


class TestRelocateSelection:
    """편집 후 선택 노드 재탐색 테스트."""

    def test_by_id(self):
        nodes = [GraphNode("1", []), GraphNode("2", ["x"])]
        previous = GraphNode("2", ["moved"])
        assert relocate_selection(previous, nodes) is nodes[1]

    def test_path_fallback_when_id_missing(self):
        nodes = [GraphNode("10", []), GraphNode("11", ["a", 0])]
        previous = GraphNode("2", ["a", 0])
        assert relocate_selection(previous, nodes) is nodes[1]

    def test_path_when_no_id(self):
        nodes = [GraphNode("1", []), GraphNode("2", ["a"])]
        previous = GraphNode(None, ["a"])
        assert relocate_selection(previous, nodes) is nodes[1]

    def test_miss(self):
        nodes = [GraphNode("1", [])]
        assert relocate_selection(GraphNode("9", ["gone"]), nodes) is None

    def test_no_previous(self):
        assert relocate_selection(None, [GraphNode("1", [])]) is None


class TestResynchronize:
    def test_mutates_copy(self):
        doc = {"customer": {"name": "Ann"}}
        previous = GraphNode("2", ["customer"])
        result = resynchronize(doc, {"name": "Bob"}, ["customer"], previous)
        assert result.document == {"customer": {"name": "Bob"}}
        assert doc == {"customer": {"name": "Ann"}}
        assert result.selection.path == ["customer"]
        assert result.selection.text == [FieldRow("name", "Bob", FieldType.STRING)]

    def test_id_preserved_across_rebuild(self):
        doc = {"a": {"x": 1}, "b": {"y": 2}}
        before = build_graph(doc)
        previous = find_node(before.nodes, path=["b"])
        result = resynchronize(doc, 5, ["b", "y"], previous)
        assert result.selection.id == previous.id
        assert result.selection.path == ["b"]

    def test_path_fallback_after_id_change(self):
        doc = {"b": {"y": 2}}

        def builder(raw):
            graph = build_graph(json.loads(raw))
            for node in graph.nodes:
                node.id = "new-" + node.id
            return graph

        previous = GraphNode("2", ["b"])
        result = resynchronize(doc, 3, ["b", "y"], previous, builder)
        assert result.selection.id == 'new-["b"]'
        assert result.selection.path == ["b"]

    def test_miss_clears_selection(self):
        doc = {"a": {"b": 1}}
        previous = GraphNode(None, ["a"])
        result = resynchronize(doc, 7, ["a"], previous)
        assert result.document == {"a": 7}
        assert result.selection is None

    def test_builder_failure(self):
        def broken(raw):
            raise ValueError("bad structure")

        doc = {"a": 1}
        with pytest.raises(ResyncError):
            resynchronize(doc, 2, ["a"], GraphNode("1", []), broken)
        assert doc == {"a": 1}

    def test_nodes_returned(self):
        result = resynchronize({}, [1, 2], ["list"], None)
        assert isinstance(result.nodes, list)
        assert [n.path for n in result.nodes] == [[], ["list", 0], ["list", 1]]
        assert result.nodes is result.graph.nodes
        assert json.loads(result.raw) == result.document
        assert result.selection is None

    def test_graph_type(self):
        assert isinstance(build_graph({}), Graph)
