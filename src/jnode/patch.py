"""Format-preserving edits of a JSON document at a path."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from ._jsonpath import JsonPath, path_to_string
from ._scanner import JsonNode, ScanError, find_node_at_path, find_property, parse_tree
from .parse import loads_strict

_LOG = logging.getLogger(__name__)


class PatchError(ValueError):
    """Raised when an edit cannot be computed or applied to a document."""


@dataclass(frozen=True)
class FormattingOptions:
    tab_size: int = 2
    insert_spaces: bool = True
    eol: str | None = None  # None: detect from the document

    @property
    def indent_unit(self) -> str:
        return " " * self.tab_size if self.insert_spaces else "\t"

    def resolve_eol(self, text: str) -> str:
        if self.eol:
            return self.eol
        return "\r\n" if "\r\n" in text else "\n"


@dataclass(frozen=True)
class TextEdit:
    """Replace ``length`` characters at ``offset`` with ``content``."""

    offset: int
    length: int
    content: str

    @property
    def end(self) -> int:
        return self.offset + self.length


def _line_indent(text: str, offset: int) -> str:
    """offset이 속한 라인의 선행 공백."""
    start = text.rfind("\n", 0, offset) + 1
    end = start
    while end < len(text) and text[end] in " \t":
        end += 1
    return text[start:end]


def _starts_line(text: str, offset: int) -> bool:
    start = text.rfind("\n", 0, offset) + 1
    return not text[start:offset].strip()


class _EditBuilder:
    """Builds the edit for one path against a scanned document."""

    def __init__(self, text: str, options: FormattingOptions) -> None:
        self.text = text
        self.options = options
        self.eol = options.resolve_eol(text)
        # single-line documents stay single-line
        self.compact = "\n" not in text

    def format_value(self, value: object, indent: str) -> str:
        try:
            if self.compact:
                return json.dumps(value, ensure_ascii=False, allow_nan=False)
            dumped = json.dumps(
                value,
                indent=self.options.indent_unit,
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError, RecursionError) as exc:
            raise PatchError(f"Value is not JSON serializable: {exc}") from exc
        return dumped.replace("\n", self.eol + indent)

    def replace(self, node: JsonNode, value: object) -> TextEdit:
        indent = _line_indent(self.text, node.offset)
        return TextEdit(node.offset, node.length, self.format_value(value, indent))

    def append(self, parent: JsonNode, prefix: str, value: object) -> TextEdit:
        """Add a member after the last child of an object/array."""
        text = self.text
        if parent.children:
            last = parent.children[-1]
            indent = _line_indent(text, last.offset)
            if not self.compact and _starts_line(text, last.offset):
                sep = "," + self.eol + indent
            else:
                sep = ", "
            content = sep + prefix + self.format_value(value, indent)
            return TextEdit(last.end, 0, content)

        # 빈 컨테이너: 괄호 사이 공백을 통째로 교체
        if self.compact:
            content = prefix + self.format_value(value, "")
        else:
            outer = _line_indent(text, parent.offset)
            inner = outer + self.options.indent_unit
            content = (
                self.eol + inner + prefix + self.format_value(value, inner)
                + self.eol + outer
            )
        return TextEdit(parent.offset + 1, parent.length - 2, content)


def compute_edits(
    text: str,
    path: JsonPath,
    value: object,
    options: FormattingOptions | None = None,
) -> list[TextEdit]:
    """Compute the edits that write ``value`` at ``path``.

    Missing intermediate members are created. Only the span of the target
    value (or the insertion point of a new member) is touched.
    """
    options = options or FormattingOptions()
    try:
        root = parse_tree(text)
    except (ScanError, RecursionError) as exc:
        raise PatchError(f"Document is not valid JSON: {exc}") from exc

    builder = _EditBuilder(text, options)
    remaining = list(path)
    if not remaining:
        return [builder.replace(root, value)]

    parent: JsonNode | None = None
    segment: str | int = ""
    while remaining:
        segment = remaining.pop()
        parent = find_node_at_path(root, remaining)
        if parent is not None:
            break
        value = {segment: value} if isinstance(segment, str) else [value]
    assert parent is not None  # the root always resolves

    if parent.type == "object" and isinstance(segment, str):
        prop = find_property(parent, segment)
        if prop is not None:
            return [builder.replace(prop.children[1], value)]
        prefix = json.dumps(segment, ensure_ascii=False) + ": "
        return [builder.append(parent, prefix, value)]

    if (
        parent.type == "array"
        and isinstance(segment, int)
        and not isinstance(segment, bool)
    ):
        count = len(parent.children)
        if 0 <= segment < count:
            return [builder.replace(parent.children[segment], value)]
        if segment == -1 or segment >= count:
            return [builder.append(parent, "", value)]
        raise PatchError(f"Invalid array index: {segment}")

    kind = "property" if isinstance(segment, str) else "index"
    raise PatchError(f"Can not add {kind} to parent of type {parent.type}")


def apply_edits(text: str, edits: list[TextEdit]) -> str:
    """Apply all edits at once. Overlapping edits raise PatchError."""
    ordered = sorted(edits, key=lambda e: e.offset)
    result = text
    last_modified = len(text)
    for edit in reversed(ordered):
        if edit.offset < 0 or edit.length < 0 or edit.end > last_modified:
            raise PatchError(f"Overlapping edit at offset {edit.offset}")
        result = result[: edit.offset] + edit.content + result[edit.end :]
        last_modified = edit.offset
    return result


def patch_document(
    text: str,
    path: JsonPath,
    value: object,
    options: FormattingOptions | None = None,
) -> str:
    """Return the document with ``value`` written at ``path``.

    Raises PatchError without producing any text if the edit cannot be made.
    """
    edits = compute_edits(text, path, value, options)
    new_text = apply_edits(text, edits)
    try:
        loads_strict(new_text)
    except (json.JSONDecodeError, ValueError, RecursionError) as exc:
        raise PatchError(f"Patched document is not valid JSON: {exc}") from exc
    _LOG.debug(
        "patched %s with %d edit(s)", path_to_string(path), len(edits)
    )
    return new_text
