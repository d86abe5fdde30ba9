"""Find the same logical node again after the node set is rebuilt."""

from __future__ import annotations

from typing import Iterable, Protocol

from ._jsonpath import JsonPath
from .graph import NodeData


class SelectionProvider(Protocol):
    def current_selection(self) -> NodeData | None: ...

    def all_nodes(self) -> list[NodeData]: ...

    def set_selection(self, node: NodeData | None) -> None: ...


def _same_segment(a: object, b: object) -> bool:
    # 0 == False and 1 == True in Python; path segments must not mix them.
    return type(a) is type(b) and a == b


def paths_equal(a: JsonPath, b: JsonPath) -> bool:
    return len(a) == len(b) and all(_same_segment(x, y) for x, y in zip(a, b))


def find_node_by_path(
    nodes: Iterable[NodeData], path: JsonPath
) -> NodeData | None:
    for node in nodes:
        if paths_equal(tuple(node.path), tuple(path)):
            return node
    return None


def reselect(provider: SelectionProvider, path: JsonPath) -> NodeData | None:
    """Select the node at ``path`` if it still exists. A miss is not an error."""
    match = find_node_by_path(provider.all_nodes(), path)
    if match is not None:
        provider.set_selection(match)
    return match
