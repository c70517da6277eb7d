"""Apply an edit to a document snapshot and find the edited node again."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field

from ._jsonpath import NodePath, set_value_at_path
from .graph import Graph, GraphBuilder, GraphNode, find_node, parse_graph

logger = logging.getLogger(__name__)


class ResyncError(RuntimeError):
    """The graph could not be rebuilt from the edited document."""


@dataclass
class ResyncResult:
    document: object
    raw: str = ""
    graph: Graph = field(default_factory=Graph)
    selection: GraphNode | None = None

    @property
    def nodes(self) -> list[GraphNode]:
        return self.graph.nodes


def relocate_selection(
    previous: GraphNode | None, nodes: list[GraphNode]
) -> GraphNode | None:
    """Find the previously selected node among rebuilt nodes.

    The id is tried first, then the path. Builders that do not keep ids
    across rebuilds still resolve through the path; a miss on both returns
    None.
    """
    if previous is None:
        return None
    if previous.id is not None:
        match = find_node(nodes, node_id=previous.id)
        if match is not None:
            return match
    return find_node(nodes, path=previous.path)


def resynchronize(
    document: object,
    value: object,
    path: NodePath,
    previous: GraphNode | None,
    graph_builder: GraphBuilder = parse_graph,
) -> ResyncResult:
    """Write value at path in a copy of document and rebuild its graph.

    The passed document is left untouched.
    """
    new_document = copy.deepcopy(document)
    set_value_at_path(new_document, path, value)
    # NaN/Infinity would make the result invalid JSON
    raw = json.dumps(new_document, ensure_ascii=False, allow_nan=False)

    try:
        graph = graph_builder(raw)
    except Exception as exc:
        logger.warning("Graph update after node edit failed: %s", exc)
        raise ResyncError(f"graph rebuild failed: {exc}") from exc

    return ResyncResult(
        document=new_document,
        raw=raw,
        graph=graph,
        selection=relocate_selection(previous, graph.nodes),
    )
