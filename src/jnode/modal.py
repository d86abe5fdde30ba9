"""Modal screen showing (and editing) the selected node."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static, TextArea

from .graph import NodeData
from .session import NodeEditSession, SaveStatus


class NodeModal(ModalScreen[None]):
    """Content + JSON path of one node, with Edit / Save / Cancel."""

    DEFAULT_CSS = """
    NodeModal {
        align: center middle;
    }
    #node-modal {
        width: 80;
        max-width: 90%;
        height: auto;
        max-height: 90%;
        border: solid $accent;
        background: $surface;
        padding: 0 1;
    }
    #node-modal-header {
        height: auto;
    }
    #content-title, #path-title {
        width: 1fr;
        padding: 1 0 0 0;
    }
    #content-view, #path-view {
        height: auto;
        max-height: 16;
        background: $panel;
        padding: 0 1;
    }
    #content-editor {
        height: 14;
    }
    #node-modal-header Button {
        min-width: 8;
        margin-left: 1;
    }
    """

    BINDINGS = [("escape", "close", "Close")]

    def __init__(self, session: NodeEditSession, **kwargs) -> None:
        super().__init__(**kwargs)
        self.session = session

    def compose(self) -> ComposeResult:
        with Vertical(id="node-modal"):
            with Horizontal(id="node-modal-header"):
                yield Static("[b]Content[/b]", id="content-title")
                yield Button("Edit", id="edit", variant="primary")
                yield Button("Save", id="save", variant="success")
                yield Button("Cancel", id="cancel")
                yield Button("✕", id="close", variant="error")
            yield Static(id="content-view")
            yield TextArea(id="content-editor")
            yield Static("[b]JSON Path[/b]", id="path-title")
            yield Static(id="path-view")

    def on_mount(self) -> None:
        self.session.open()
        self.refresh_view()

    def refresh_view(self) -> None:
        session = self.session
        editing = session.editing
        self.query_one("#content-view", Static).update(Text(session.display_text))
        self.query_one("#path-view", Static).update(Text(session.path_text))
        self.query_one("#content-view").display = not editing
        self.query_one("#content-editor").display = editing
        self.query_one("#edit").display = not editing and not session.read_only
        self.query_one("#cancel").display = editing
        save = self.query_one("#save", Button)
        save.display = editing
        save.disabled = session.saving

    def selection_changed(self, node: NodeData | None) -> None:
        """The selected node was switched from outside the modal."""
        self.session.selection_changed(node)
        self.refresh_view()

    # -- Event handlers ----------------------------------------------------

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "edit":
            self.action_start_edit()
        elif button_id == "save":
            self.action_save()
        elif button_id == "cancel":
            self.action_cancel()
        elif button_id == "close":
            self.action_close()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self.session.set_edit_text(event.text_area.text)

    def action_start_edit(self) -> None:
        if not self.session.start_edit():
            return
        editor = self.query_one("#content-editor", TextArea)
        editor.load_text(self.session.edit_text)
        self.refresh_view()
        editor.focus()

    def action_save(self) -> None:
        if not self.session.editing:
            return
        save = self.query_one("#save", Button)
        save.disabled = True
        self.session.set_edit_text(self.query_one("#content-editor", TextArea).text)
        result = self.session.save()
        if result.status is SaveStatus.FAILED:
            self.notify(f"Failed to apply edit: {result.error}", severity="error", timeout=6)
        elif result.ok:
            self.notify("Node updated", severity="information")
        self.refresh_view()

    def action_cancel(self) -> None:
        self.session.cancel()
        self.refresh_view()

    def action_close(self) -> None:
        self.session.close()
        self.dismiss()
