"""Graph representation of a JSON document: one node per object or scalar item."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field

from ._fragment import FieldRow, FieldType
from ._jsonpath import NodePath, paths_equal


@dataclass
class GraphNode:
    """A location in the document as shown in the graph.

    Nodes from ``build_graph`` take their ``id`` from ``path`` (``node_id_for``).
    """

    id: str | None
    path: NodePath | None
    text: list[FieldRow] = field(default_factory=list)


# 편집기에서 열린 노드도 같은 모양
SelectedNode = GraphNode


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str


@dataclass
class Graph:
    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)


GraphBuilder = Callable[[str], Graph]


def node_id_for(path: NodePath) -> str:
    """Id of the node at path; the same location always gets the same id."""
    # JSON text keeps 0 and "0" apart, unlike the bracket display form
    return json.dumps(path, ensure_ascii=False)


class _Builder:
    def __init__(self) -> None:
        self.graph = Graph()

    def _add_node(
        self, path: NodePath, rows: list[FieldRow], parent: str | None
    ) -> GraphNode:
        node = GraphNode(id=node_id_for(path), path=path, text=rows)
        self.graph.nodes.append(node)
        if parent is not None:
            self.graph.edges.append(GraphEdge(parent, node.id))
        return node

    def visit(self, value: object, path: NodePath, parent: str | None) -> None:
        if isinstance(value, dict):
            self._visit_object(value, path, parent)
        elif isinstance(value, list):
            # arrays have no node of their own; items hang off the parent
            for i, item in enumerate(value):
                self.visit(item, path + [i], parent)
        else:
            self._add_node(path, [FieldRow(None, value, FieldType.of(value))], parent)

    def _visit_object(self, obj: dict, path: NodePath, parent: str | None) -> None:
        rows: list[FieldRow] = []
        children: list[tuple[str, object]] = []
        for key, value in obj.items():
            kind = FieldType.of(value)
            if kind.is_container:
                rows.append(FieldRow(key, len(value), kind))
                children.append((key, value))
            else:
                rows.append(FieldRow(key, value, kind))
        node = self._add_node(path, rows, parent)
        for key, value in children:
            self.visit(value, path + [key], node.id)


def build_graph(document: object) -> Graph:
    """Build nodes and edges for a decoded document.

    A node's id is derived from its path, so after a rebuild an id either
    names the same location or is gone.
    """
    builder = _Builder()
    builder.visit(document, [], None)
    return builder.graph


def parse_graph(raw: str) -> Graph:
    """Build the graph from JSON text."""
    return build_graph(json.loads(raw))


def find_node(
    nodes: list[GraphNode], node_id: str | None = None, path: NodePath | None = None
) -> GraphNode | None:
    """Look a node up by id, or by path when no id is given."""
    for node in nodes:
        if node_id is not None:
            if node.id == node_id:
                return node
        elif paths_equal(node.path, path):
            return node
    return None


class GraphStore:
    """Holds the current graph and the selected node."""

    def __init__(
        self, raw: str = "", builder: GraphBuilder = parse_graph
    ) -> None:
        self.builder = builder
        self.nodes: list[GraphNode] = []
        self.edges: list[GraphEdge] = []
        self.selected_node: GraphNode | None = None
        if raw:
            self.set_graph(raw)

    def set_graph(self, raw: str, graph: Graph | None = None) -> None:
        """Rebuild nodes and edges from JSON text.

        A graph already built from raw with this store's builder can be passed
        in to skip the rebuild.
        """
        if graph is None:
            graph = self.builder(raw)
        self.nodes = graph.nodes
        self.edges = graph.edges

    def set_selected_node(self, node: GraphNode | None) -> None:
        self.selected_node = node
