"""Edit session state and the commit sequence for a single node edit."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Protocol

from ._coerce import coerce_value
from ._fragment import render_fragment, restore_omitted_rows
from ._jsonpath import format_path, get_value_at_path
from .graph import Graph, GraphBuilder, GraphNode, parse_graph
from .resync import ResyncResult, resynchronize

logger = logging.getLogger(__name__)


class ContentStoreLike(Protocol):
    def get_contents(self) -> str: ...

    def get_format(self) -> object: ...

    def decode(self, raw: str, fmt: object) -> object: ...

    def encode(self, value: object, fmt: object) -> object: ...

    def set_contents(self, contents: str, has_changes: bool) -> object: ...


class GraphStoreLike(Protocol):
    selected_node: GraphNode | None
    nodes: list[GraphNode]

    def set_graph(self, raw: str, graph: Graph | None = None) -> None: ...

    def set_selected_node(self, node: GraphNode | None) -> None: ...


@dataclass
class EditSession:
    """Transient editing state of one open modal."""

    editing: bool = False
    draft_text: str = ""
    saving: bool = False
    error: str | None = None

    @property
    def can_commit(self) -> bool:
        return self.editing and not self.saving


async def _resolve(result: object) -> object:
    """Stores may answer directly or with an awaitable."""
    if inspect.isawaitable(result):
        return await result
    return result


class CommitCoordinator:
    """Runs coerce -> mutate -> resync -> publish for the selected node.

    The edited graph is built once, with the graph store's own builder
    unless another is given, before anything is published; publishing then
    only hands over finished results.

    Errors never leave ``commit``; they end up in ``session.error``.
    """

    def __init__(
        self,
        content_store: ContentStoreLike,
        graph_store: GraphStoreLike,
        graph_builder: GraphBuilder | None = None,
    ) -> None:
        self.content_store = content_store
        self.graph_store = graph_store
        self.graph_builder = graph_builder or getattr(
            graph_store, "builder", parse_graph
        )

    # -- Session -----------------------------------------------------------

    def begin_edit(self, session: EditSession, node: GraphNode | None) -> None:
        session.editing = True
        session.draft_text = render_fragment(node.text if node else None)
        session.error = None

    def cancel_edit(self, session: EditSession) -> None:
        session.editing = False
        session.error = None

    # -- Commit ------------------------------------------------------------

    async def commit(self, session: EditSession) -> bool:
        """Commit the session's draft into the document.

        Returns True when the edited document was published.
        """
        if session.saving:
            return False

        session.saving = True
        session.error = None
        try:
            node = self.graph_store.selected_node
            if node is None or not node.path:
                # nothing to do: no node, or the document root
                return False

            value = coerce_value(session.draft_text)
            fmt = self.content_store.get_format()
            document = await _resolve(
                self.content_store.decode(self.content_store.get_contents(), fmt)
            )
            value = restore_omitted_rows(
                node.text, value, get_value_at_path(document, node.path)
            )
            result = resynchronize(
                document, value, node.path, node, self.graph_builder
            )
            new_content = await _resolve(
                self.content_store.encode(result.document, fmt)
            )

            await _resolve(
                self.content_store.set_contents(new_content, has_changes=True)
            )
            self._publish_graph(result, node)
            session.editing = False
            logger.debug("Committed edit at %s", format_path(node.path))
            return True
        except Exception as exc:
            session.error = str(exc) or "Failed to apply edit"
            logger.exception("Failed to apply node edit")
            return False
        finally:
            session.saving = False

    def _publish_graph(self, result: ResyncResult, previous: GraphNode) -> None:
        self.graph_store.set_graph(result.raw, result.graph)
        if result.selection is None:
            logger.info(
                "Edited node %s not found after rebuild; selection cleared",
                format_path(previous.path),
            )
        self.graph_store.set_selected_node(result.selection)
