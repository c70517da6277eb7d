"""Node editor application: browse the graph of a JSON document, edit nodes."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, OptionList
from textual.widgets.option_list import Option

from ._fragment import render_fragment
from ._jsonpath import format_path
from ._logging import setup_logging
from .commit import CommitCoordinator
from .content import ContentError, ContentFormat, ContentStore, decode_content
from .graph import GraphNode, GraphStore, find_node
from .modal import NodeModal

logger = logging.getLogger(__name__)

SAMPLE_JSON = """\
{
    "customer": {
        "name": "Ann",
        "email": "ann@example.com",
        "vip": true
    },
    "orders": [
        {"id": 1001, "total": 25.5, "items": ["pen", "paper"]},
        {"id": 1002, "total": 9, "items": []}
    ],
    "notes": null
}"""

_PREVIEW_WIDTH = 60


def _node_prompt(node: GraphNode) -> Text:
    preview = " ".join(render_fragment(node.text).split())
    if len(preview) > _PREVIEW_WIDTH:
        preview = preview[: _PREVIEW_WIDTH - 1] + "…"
    return Text.assemble(
        (format_path(node.path), "bold cyan"), "  ", (preview, "dim")
    )


class NodeEditApp(App):
    """TUI app listing graph nodes; Enter opens the node modal."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #nodes {
        height: 1fr;
        border: solid $accent;
    }
    """

    TITLE = "Node Editor"
    BINDINGS = [
        ("ctrl+s", "save", "Save"),
        ("q", "request_quit", "Quit"),
        ("Q", "quit", "Discard & quit"),
    ]
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        file_path: str = "",
        initial_content: str = "",
        fmt: ContentFormat = ContentFormat.JSON,
        read_only: bool = False,
        indent: int = 4,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.file_path = file_path
        self.read_only = read_only
        self.content_store = ContentStore(initial_content, fmt, indent)
        self.graph_store = GraphStore()
        self.coordinator = CommitCoordinator(self.content_store, self.graph_store)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield OptionList(id="nodes")
        yield Footer()

    def on_mount(self) -> None:
        try:
            document = decode_content(
                self.content_store.get_contents(), self.content_store.get_format()
            )
        except ContentError as exc:
            self.notify(f"Invalid JSON: {exc}", severity="error", timeout=6)
            document = {}
        # graph store always takes plain JSON text
        self.graph_store.set_graph(json.dumps(document, ensure_ascii=False))
        self._reload_nodes()
        self._update_title()
        self.query_one("#nodes").focus()

    def _update_title(self) -> None:
        ro = " [RO]" if self.read_only else ""
        modified = " [+]" if self.content_store.has_changes else ""
        self.sub_title = (self.file_path or "[new]") + ro + modified

    def _reload_nodes(self) -> None:
        option_list = self.query_one("#nodes", OptionList)
        option_list.clear_options()
        option_list.add_options(
            [Option(_node_prompt(node), id=node.id) for node in self.graph_store.nodes]
        )
        selected = self.graph_store.selected_node
        if selected is None:
            return
        for index, node in enumerate(self.graph_store.nodes):
            if node is selected:
                option_list.highlighted = index
                break

    # -- Event handlers ----------------------------------------------------

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        node = find_node(self.graph_store.nodes, node_id=event.option.id)
        if node is None:
            return
        self.graph_store.set_selected_node(node)
        self.push_screen(
            NodeModal(self.coordinator, read_only=self.read_only),
            self._on_modal_closed,
        )

    def _on_modal_closed(self, committed: bool | None) -> None:
        if committed:
            self._reload_nodes()
            self._update_title()
        self.query_one("#nodes").focus()

    def action_save(self) -> None:
        if self.read_only:
            self.notify("Read-only document", severity="warning")
            return
        if not self.file_path:
            self.notify("No file name — start with: nodeedit <file>", severity="warning")
            return
        try:
            path = Path(self.file_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.content_store.get_contents(), encoding="utf-8")
        except OSError as exc:
            logger.error("Save failed: %s", exc)
            self.notify(f"Save failed: {exc}", severity="error", timeout=6)
            return
        self.content_store.has_changes = False
        self._update_title()
        self.notify(f"Saved: {self.file_path}", severity="information")

    def action_request_quit(self) -> None:
        if self.content_store.has_changes:
            self.notify(
                "Unsaved changes! Use ctrl+s to save or Q to discard",
                severity="warning",
            )
            return
        self.exit()


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="nodeedit",
        description="Edit single nodes of a JSON document",
    )
    parser.add_argument("file", nargs="?", default="", help="JSON file to open")
    parser.add_argument(
        "-R", "--read-only",
        action="store_true",
        default=False,
        help="open in read-only mode",
    )
    parser.add_argument(
        "--format",
        choices=[fmt.value for fmt in ContentFormat],
        default=None,
        help="content format (default: from file extension)",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=4,
        help="indent used when writing JSON back (default: 4)",
    )
    parser.add_argument("--log-file", default="", help="write log records to a file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="log level (default: WARNING)",
    )
    args = parser.parse_args()

    setup_logging(getattr(logging, args.log_level), args.log_file)

    file_path: str = args.file
    if args.format:
        fmt = ContentFormat(args.format)
    else:
        fmt = ContentFormat.from_path(file_path)
    initial_content = SAMPLE_JSON if not file_path else ""

    if file_path:
        path = Path(file_path)
        try:
            if path.exists():
                initial_content = path.read_text(encoding="utf-8")
            else:
                # New file — start with empty object / empty line
                initial_content = "" if fmt is ContentFormat.JSONL else "{}"
        except (PermissionError, UnicodeDecodeError) as exc:
            print(f"nodeedit: {exc}", file=sys.stderr)
            sys.exit(1)

    app = NodeEditApp(
        file_path=file_path,
        initial_content=initial_content,
        fmt=fmt,
        read_only=args.read_only,
        indent=args.indent,
    )
    app.run()


if __name__ == "__main__":
    main()
