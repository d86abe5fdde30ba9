"""JSON 텍스트를 offset 정보를 가진 노드 트리로 파싱."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field

_WHITESPACE = " \t\n\r"
_NUMBER_RE = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][-+]?[0-9]+)?")
_LITERALS = (
    ("true", True, "boolean"),
    ("false", False, "boolean"),
    ("null", None, "null"),
)


class ScanError(ValueError):
    """텍스트가 strict JSON이 아닐 때 발생."""

    def __init__(self, msg: str, offset: int) -> None:
        super().__init__(f"{msg} (offset {offset})")
        self.msg = msg
        self.offset = offset


@dataclass
class JsonNode:
    """텍스트 구간 [offset, offset + length)에 대응하는 JSON 노드.

    type: object | array | property | string | number | boolean | null
    property 노드의 children은 [key, value].
    """

    type: str
    offset: int
    length: int = 0
    value: object = None
    children: list[JsonNode] = field(default_factory=list)

    @property
    def end(self) -> int:
        return self.offset + self.length


class _Scanner:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def skip_whitespace(self) -> None:
        text = self.text
        pos = self.pos
        while pos < len(text) and text[pos] in _WHITESPACE:
            pos += 1
        self.pos = pos

    def peek(self) -> str:
        return self.text[self.pos : self.pos + 1]

    def error(self, msg: str) -> ScanError:
        return ScanError(msg, self.pos)

    def value(self) -> JsonNode:
        self.skip_whitespace()
        ch = self.peek()
        if ch == "{":
            return self.object()
        if ch == "[":
            return self.array()
        if ch == '"':
            return self.string()
        start = self.pos
        for literal, value, kind in _LITERALS:
            if self.text.startswith(literal, start):
                self.pos = start + len(literal)
                return JsonNode(kind, start, len(literal), value)
        m = _NUMBER_RE.match(self.text, start)
        if m:
            raw = m.group()
            self.pos = m.end()
            try:
                number = float(raw) if any(c in raw for c in ".eE") else int(raw)
            except ValueError as exc:
                raise ScanError(f"Invalid number: {exc}", start) from exc
            return JsonNode("number", start, len(raw), number)
        raise self.error("Expecting value")

    def string(self) -> JsonNode:
        start = self.pos
        try:
            value, end = json.decoder.scanstring(self.text, start + 1, True)
        except json.JSONDecodeError as exc:
            raise ScanError(exc.msg, exc.pos) from exc
        self.pos = end
        return JsonNode("string", start, end - start, value)

    def object(self) -> JsonNode:
        node = JsonNode("object", self.pos)
        self.pos += 1
        self.skip_whitespace()
        if self.peek() == "}":
            self.pos += 1
            node.length = self.pos - node.offset
            return node
        while True:
            self.skip_whitespace()
            if self.peek() != '"':
                raise self.error("Expecting property name enclosed in double quotes")
            key = self.string()
            self.skip_whitespace()
            if self.peek() != ":":
                raise self.error("Expecting ':' delimiter")
            self.pos += 1
            val = self.value()
            prop = JsonNode(
                "property", key.offset, val.end - key.offset, key.value, [key, val]
            )
            node.children.append(prop)
            self.skip_whitespace()
            ch = self.peek()
            self.pos += 1
            if ch == ",":
                continue
            if ch == "}":
                break
            self.pos -= 1
            raise self.error("Expecting ',' delimiter")
        node.length = self.pos - node.offset
        return node

    def array(self) -> JsonNode:
        node = JsonNode("array", self.pos)
        self.pos += 1
        self.skip_whitespace()
        if self.peek() == "]":
            self.pos += 1
            node.length = self.pos - node.offset
            return node
        while True:
            node.children.append(self.value())
            self.skip_whitespace()
            ch = self.peek()
            self.pos += 1
            if ch == ",":
                continue
            if ch == "]":
                break
            self.pos -= 1
            raise self.error("Expecting ',' delimiter")
        node.length = self.pos - node.offset
        return node


def parse_tree(text: str) -> JsonNode:
    """전체 텍스트를 파싱. strict JSON이 아니면 ScanError."""
    scanner = _Scanner(text)
    root = scanner.value()
    scanner.skip_whitespace()
    if scanner.pos != len(text):
        raise scanner.error("Extra data")
    return root


def find_property(node: JsonNode, key: str) -> JsonNode | None:
    """object 노드에서 key에 해당하는 property. 중복 키는 마지막 것이 유효."""
    for prop in reversed(node.children):
        if prop.value == key:
            return prop
    return None


def find_node_at_path(root: JsonNode, path) -> JsonNode | None:
    """path 위치의 value 노드. 없으면 None."""
    node = root
    for seg in path:
        if node.type == "object" and isinstance(seg, str):
            prop = find_property(node, seg)
            if prop is None:
                return None
            node = prop.children[1]
        elif (
            node.type == "array"
            and isinstance(seg, int)
            and not isinstance(seg, bool)
            and 0 <= seg < len(node.children)
        ):
            node = node.children[seg]
        else:
            return None
    return node
