"""Edit session for the node modal: view, edit, save, cancel."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

from ._jsonpath import JsonPath, path_to_string
from .graph import NodeData
from .merge import MergeOutcome, resolve_merge
from .parse import ParseOutcome, parse_edit
from .patch import FormattingOptions, PatchError, patch_document
from .reconcile import SelectionProvider, reselect
from .rows import normalize_rows

_LOG = logging.getLogger(__name__)


class DocumentProvider(Protocol):
    def read_text(self) -> str: ...

    def replace_text(self, text: str) -> None: ...


class SessionState(Enum):
    VIEWING = auto()
    EDITING = auto()


class SaveStatus(Enum):
    SAVED = auto()
    NO_SELECTION = auto()
    NOT_EDITING = auto()
    BUSY = auto()
    FAILED = auto()


@dataclass(frozen=True)
class EditOutcome:
    parsed: ParseOutcome
    merged: MergeOutcome
    text: str


@dataclass(frozen=True)
class SaveResult:
    status: SaveStatus
    error: str = ""
    outcome: EditOutcome | None = None
    reselected: NodeData | None = None

    @property
    def ok(self) -> bool:
        return self.status == SaveStatus.SAVED


def apply_edit(
    document: str,
    path: JsonPath,
    edit_text: str,
    options: FormattingOptions | None = None,
) -> EditOutcome:
    """parse -> merge -> patch. Only the patch step can raise (PatchError)."""
    parsed = parse_edit(edit_text)
    merged = resolve_merge(document, path, parsed.value)
    _LOG.debug(
        "edit at %s: parsed as %s, %s",
        path_to_string(path),
        parsed.branch.name,
        merged.decision.name,
    )
    new_text = patch_document(document, path, merged.value, options)
    return EditOutcome(parsed, merged, new_text)


class NodeEditSession:
    """State behind the node modal.

    VIEWING --start_edit--> EDITING --save ok--> VIEWING
                            EDITING --cancel--> VIEWING
                            EDITING --save failed--> EDITING
    open/close and switching to a different node always land in VIEWING.
    """

    def __init__(
        self,
        selection: SelectionProvider,
        documents: DocumentProvider,
        options: FormattingOptions | None = None,
        read_only: bool = False,
    ) -> None:
        self.selection = selection
        self.documents = documents
        self.options = options or FormattingOptions()
        self.read_only = read_only
        self.state = SessionState.VIEWING
        self.opened = False
        self.edit_text = ""
        self.last_error = ""
        self._saving = False
        self._node_id: str | None = None

    # -- Exposed state -----------------------------------------------------

    @property
    def node(self) -> NodeData | None:
        return self.selection.current_selection()

    @property
    def editing(self) -> bool:
        return self.state == SessionState.EDITING

    @property
    def saving(self) -> bool:
        return self._saving

    @property
    def display_text(self) -> str:
        node = self.node
        return normalize_rows(node.rows if node else None)

    @property
    def path_text(self) -> str:
        node = self.node
        return path_to_string(node.path if node else None)

    # -- Lifecycle ---------------------------------------------------------

    def _reset(self) -> None:
        self.state = SessionState.VIEWING
        self.edit_text = ""
        self.last_error = ""

    def open(self) -> None:
        self.opened = True
        node = self.node
        self._node_id = node.id if node else None
        self._reset()

    def close(self) -> None:
        self.opened = False
        self._reset()

    def selection_changed(self, node: NodeData | None) -> None:
        node_id = node.id if node else None
        if node_id != self._node_id:
            self._node_id = node_id
            self._reset()

    # -- User intents ------------------------------------------------------

    def start_edit(self) -> bool:
        if self.read_only or self.node is None:
            return False
        self.edit_text = self.display_text
        self.last_error = ""
        self.state = SessionState.EDITING
        return True

    def set_edit_text(self, text: str) -> None:
        if self.editing:
            self.edit_text = text

    def cancel(self) -> None:
        self._reset()

    def save(self) -> SaveResult:
        if self._saving:
            _LOG.warning("save ignored: another save is in progress")
            return SaveResult(SaveStatus.BUSY)
        node = self.node
        if node is None:
            return SaveResult(SaveStatus.NO_SELECTION)
        if not self.editing:
            return SaveResult(SaveStatus.NOT_EDITING)

        self._saving = True
        try:
            path = tuple(node.path)
            original = self.documents.read_text()
            try:
                outcome = apply_edit(original, path, self.edit_text, self.options)
            except PatchError as exc:
                self.last_error = str(exc)
                _LOG.warning(
                    "failed to apply edit at %s: %s", path_to_string(path), exc
                )
                return SaveResult(SaveStatus.FAILED, error=self.last_error)

            self.documents.replace_text(outcome.text)
            match = reselect(self.selection, path)
            if match is None:
                _LOG.debug("node at %s not found after rebuild", path_to_string(path))
            else:
                self._node_id = match.id
            self._reset()
            return SaveResult(SaveStatus.SAVED, outcome=outcome, reselected=match)
        finally:
            self._saving = False
