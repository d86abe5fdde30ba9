"""Terminal app: raw JSON text, node tree and the node modal."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.logging import TextualHandler
from textual.widgets import Footer, Header, TextArea, Tree

from ._jsonpath import JsonPath, parse_path_string, path_to_string
from .document import DocumentStore, TextBuffer
from .graph import GraphStore, NodeData
from .modal import NodeModal
from .patch import FormattingOptions, PatchError
from .reconcile import find_node_by_path
from .rows import RowType, format_scalar
from .session import NodeEditSession, apply_edit

_LOG = logging.getLogger(__name__)

# Data directory path
_DATA_DIR = Path(__file__).parent / "data"


def _load_data(filename: str) -> str:
    """Load content from data directory."""
    return (_DATA_DIR / filename).read_text(encoding="utf-8")


def _node_label(node: NodeData) -> Text:
    if not node.path:
        name = "$"
    elif isinstance(node.path[-1], int):
        name = f"[{node.path[-1]}]"
    else:
        name = node.path[-1]
    label = Text(name, style="bold")
    preview = [
        f"{row.key}: {format_scalar(row.value)}" if row.key else format_scalar(row.value)
        for row in node.rows
        if row.type is RowType.SCALAR
    ]
    if preview:
        summary = ", ".join(preview)
        if len(summary) > 48:
            summary = summary[:47] + "…"
        label.append("  " + summary, style="dim")
    return label


class NodeEditApp(App):
    """TUI app that wires the document, node set and edit session together."""

    CSS_PATH = "app.tcss"
    TITLE = "JSON Node Editor"
    BINDINGS = [
        ("ctrl+s", "write", "Write file"),
        ("ctrl+q", "quit", "Quit"),
    ]
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        file_path: str = "",
        initial_content: str = "{}",
        read_only: bool = False,
        select_path: JsonPath | None = None,
        options: FormattingOptions | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.file_path = file_path
        self.read_only = read_only
        self.select_path = select_path
        self.documents = DocumentStore(initial_content)
        self.buffer = TextBuffer(initial_content)
        self.graph = GraphStore()
        self.graph.rebuild(initial_content)
        # rebuild first so the session can reselect from the new node set
        self.documents.subscribe(self.graph.rebuild)
        self.buffer.follow(self.documents)
        self.session = NodeEditSession(
            self.graph, self.documents, options=options, read_only=read_only
        )

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="main"):
            yield TextArea(self.buffer.contents, read_only=True, id="raw")
            yield Tree("$", id="nodes")
        yield Footer()

    def on_mount(self) -> None:
        self._update_title()
        self._tree = self.query_one("#nodes", Tree)
        self._raw = self.query_one("#raw", TextArea)
        self.buffer.subscribe(self._on_buffer_changed)
        self.documents.subscribe(lambda _text: self._populate_tree())
        self.graph.subscribe(self._on_selection_changed)
        self._populate_tree()
        self._tree.focus()
        if self.select_path is not None:
            node = find_node_by_path(self.graph.all_nodes(), self.select_path)
            if node is None:
                self.notify(
                    f"No node at {path_to_string(self.select_path)}",
                    severity="warning",
                )
            else:
                self.open_node(node)

    def _update_title(self) -> None:
        ro = " [RO]" if self.read_only else ""
        self.sub_title = (self.file_path or "[new]") + ro

    def _populate_tree(self) -> None:
        """Nest nodes under the closest ancestor path that has a node."""
        tree = self._tree
        nodes = self.graph.all_nodes()
        root_data = nodes[0] if nodes and not nodes[0].path else None
        tree.reset(_node_label(root_data) if root_data else "$", data=root_data)
        by_path = {(): tree.root}
        for node in nodes:
            if not node.path:
                continue
            parent_path = node.path[:-1]
            while parent_path not in by_path:
                parent_path = parent_path[:-1]
            parent = by_path[parent_path]
            by_path[node.path] = parent.add(_node_label(node), data=node)
        tree.root.expand_all()

    def _on_buffer_changed(self, text: str) -> None:
        raw = self._raw
        if raw.text != text:
            raw.load_text(text)

    def _on_selection_changed(self, node: NodeData | None) -> None:
        if isinstance(self.screen, NodeModal):
            self.screen.selection_changed(node)

    def open_node(self, node: NodeData) -> None:
        self.graph.set_selection(node)
        if isinstance(self.screen, NodeModal):
            return
        self.push_screen(NodeModal(self.session))

    # -- Event handlers ----------------------------------------------------

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        node = event.node.data
        if node is not None:
            self.open_node(node)

    def action_write(self) -> None:
        if self.read_only:
            self.notify("Read-only", severity="warning")
            return
        if not self.file_path:
            self.notify("No file name: start with jnode <file>", severity="warning")
            return
        try:
            path = Path(self.file_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.documents.read_text(), encoding="utf-8")
            self.notify(f"Saved: {self.file_path}", severity="information")
        except OSError as exc:
            _LOG.warning("save failed: %s", exc)
            self.notify(f"Save failed: {exc}", severity="error", timeout=6)


def _configure_logging(log_file: str, level: str, headless: bool) -> None:
    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    if log_file:
        logging.basicConfig(filename=log_file, level=level, format=fmt)
    elif headless:
        logging.basicConfig(stream=sys.stderr, level=level, format=fmt)
    else:
        logging.basicConfig(level=level, handlers=[TextualHandler()])


def _run_set(
    file_path: str, content: str, path: JsonPath, edit_text: str,
    options: FormattingOptions,
) -> None:
    """Headless --set: one edit, written back to the file (or stdout)."""
    try:
        outcome = apply_edit(content, path, edit_text, options)
    except PatchError as exc:
        print(f"jnode: {exc}", file=sys.stderr)
        sys.exit(1)
    if not file_path:
        sys.stdout.write(outcome.text)
        return
    try:
        Path(file_path).write_text(outcome.text, encoding="utf-8")
    except OSError as exc:
        print(f"jnode: {exc}", file=sys.stderr)
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="jnode",
        description="Edit single nodes of a JSON document in Textual",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="",
        help="JSON file to open",
    )
    parser.add_argument(
        "--select",
        metavar="PATH",
        default="",
        help='open the node at PATH, e.g. $["user"]',
    )
    parser.add_argument(
        "--set",
        nargs=2,
        metavar=("PATH", "TEXT"),
        help="apply one edit without the UI; without FILE, read stdin and write stdout",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="indent width for written values (default: 2)",
    )
    parser.add_argument(
        "--tabs",
        action="store_true",
        default=False,
        help="indent written values with tabs",
    )
    parser.add_argument(
        "-R", "--read-only",
        action="store_true",
        default=False,
        help="open in read-only mode",
    )
    parser.add_argument("--log-file", default="", help="write logs to FILE")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="log level (default: WARNING)",
    )
    args = parser.parse_args()
    _configure_logging(args.log_file, args.log_level, headless=bool(args.set))

    options = FormattingOptions(tab_size=args.indent, insert_spaces=not args.tabs)
    try:
        select_path = parse_path_string(args.select) if args.select else None
        set_path = parse_path_string(args.set[0]) if args.set else None
    except ValueError as exc:
        print(f"jnode: invalid path: {exc}", file=sys.stderr)
        sys.exit(2)

    file_path: str = args.file
    initial_content: str = _load_data("sample.json")
    if set_path is not None and not file_path:
        # headless edit without a file: filter stdin to stdout
        initial_content = sys.stdin.read()
    elif file_path:
        path = Path(file_path)
        try:
            if path.exists():
                initial_content = path.read_text(encoding="utf-8")
            else:
                initial_content = "{}"
        except OSError as exc:
            print(f"jnode: {exc}", file=sys.stderr)
            sys.exit(1)

    if set_path is not None:
        _run_set(file_path, initial_content, set_path, args.set[1], options)
        return

    app = NodeEditApp(
        file_path=file_path,
        initial_content=initial_content,
        read_only=args.read_only,
        select_path=select_path,
        options=options,
    )
    app.run()


if __name__ == "__main__":
    main()
