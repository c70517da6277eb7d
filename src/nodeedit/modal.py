"""Modal screen to view and edit one graph node."""

from __future__ import annotations

from rich.syntax import Syntax
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Static, TextArea

from ._fragment import render_fragment
from ._jsonpath import format_path
from .commit import CommitCoordinator, EditSession
from .graph import GraphNode


def _json_syntax(code: str) -> Syntax:
    return Syntax(code, "json", theme="monokai", word_wrap=True)


class NodeModal(ModalScreen[bool]):
    """Content and JSON path of the selected node, with Edit / Save / Cancel.

    Dismisses with True when an edit was committed.
    """

    DEFAULT_CSS = """
    NodeModal {
        align: center middle;
    }
    #node-dialog {
        width: auto;
        min-width: 50;
        max-width: 100;
        height: auto;
        padding: 1 2;
        border: thick $accent;
        background: $surface;
    }
    #node-header, #node-path-header {
        height: auto;
    }
    #node-header Static, #node-path-header Static {
        width: 1fr;
        text-style: bold;
    }
    #node-header Button, #node-path-header Button {
        min-width: 8;
        margin-left: 1;
    }
    #node-content {
        max-height: 16;
        height: auto;
    }
    #node-draft {
        height: 10;
    }
    #node-error {
        color: $error;
        height: auto;
    }
    #node-path-header {
        margin-top: 1;
    }
    """

    BINDINGS = [("escape", "close", "Close")]

    def __init__(
        self,
        coordinator: CommitCoordinator,
        *,
        read_only: bool = False,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.coordinator = coordinator
        self.read_only = read_only
        self.session = EditSession()
        self._committed = False

    @property
    def node(self) -> GraphNode | None:
        return self.coordinator.graph_store.selected_node

    def compose(self) -> ComposeResult:
        with Vertical(id="node-dialog"):
            with Horizontal(id="node-header"):
                yield Static("Content")
                yield Button("Edit", id="node-edit", disabled=self.read_only)
                yield Button("Cancel", id="node-cancel", variant="default")
                yield Button("Save", id="node-save", variant="primary")
                yield Button("Copy", id="node-copy-content")
                yield Button("✕", id="node-close", variant="error")
            with VerticalScroll(id="node-content"):
                yield Static(id="node-view")
            yield TextArea(id="node-draft")
            yield Static(id="node-error")
            with Horizontal(id="node-path-header"):
                yield Static("JSON Path")
                yield Button("Copy", id="node-copy-path")
            yield Static(id="node-path")

    def on_mount(self) -> None:
        self._refresh_view()

    # -- View --------------------------------------------------------------

    def _refresh_view(self) -> None:
        node = self.node
        editing = self.session.editing
        self.query_one("#node-view", Static).update(
            _json_syntax(render_fragment(node.text if node else None))
        )
        self.query_one("#node-path", Static).update(
            _json_syntax(format_path(node.path if node else None))
        )
        self.query_one("#node-content").display = not editing
        self.query_one("#node-draft").display = editing
        self.query_one("#node-edit").display = not editing
        self.query_one("#node-copy-content").display = not editing
        self.query_one("#node-cancel").display = editing
        save = self.query_one("#node-save", Button)
        save.display = editing
        save.disabled = not self.session.can_commit
        save.label = "Saving..." if self.session.saving else "Save"
        error = self.query_one("#node-error", Static)
        error.update(self.session.error or "")
        error.display = bool(self.session.error)

    # -- Actions -----------------------------------------------------------

    def _start_editing(self) -> None:
        if self.read_only:
            self.notify("Read-only document", severity="warning")
            return
        self.coordinator.begin_edit(self.session, self.node)
        draft = self.query_one("#node-draft", TextArea)
        draft.load_text(self.session.draft_text)
        self._refresh_view()
        draft.focus()

    def _cancel_editing(self) -> None:
        self.coordinator.cancel_edit(self.session)
        self._refresh_view()

    async def _save(self) -> None:
        if not self.session.can_commit:
            return
        self.session.draft_text = self.query_one("#node-draft", TextArea).text
        save = self.query_one("#node-save", Button)
        save.disabled = True
        save.label = "Saving..."
        committed = await self.coordinator.commit(self.session)
        if committed:
            self._committed = True
            if self.node is None:
                # edited node could not be located again
                self.dismiss(True)
                return
        self._refresh_view()

    def _copy(self, text: str) -> None:
        self.app.copy_to_clipboard(text)
        self.notify("Copied to clipboard", severity="information")

    def action_close(self) -> None:
        if self.session.editing:
            self._cancel_editing()
        else:
            self.dismiss(self._committed)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        button_id = event.button.id
        if button_id == "node-edit":
            self._start_editing()
        elif button_id == "node-cancel":
            self._cancel_editing()
        elif button_id == "node-save":
            await self._save()
        elif button_id == "node-copy-content":
            node = self.node
            self._copy(render_fragment(node.text if node else None))
        elif button_id == "node-copy-path":
            self._copy(format_path(self.node.path if self.node else None))
        elif button_id == "node-close":
            self.dismiss(self._committed)
