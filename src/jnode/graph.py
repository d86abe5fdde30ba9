"""Node set built from document text, plus the current selection."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Callable

from ._jsonpath import JsonPath
from .parse import loads_strict
from .rows import Row, RowType

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeData:
    id: str
    path: JsonPath
    rows: tuple[Row, ...] = field(default=())


def _row_for(key: str | None, value: object) -> Row:
    if isinstance(value, dict):
        return Row(key, len(value), RowType.OBJECT)
    if isinstance(value, list):
        return Row(key, len(value), RowType.ARRAY)
    return Row(key, value, RowType.SCALAR)


def build_nodes(data: object) -> list[NodeData]:
    """Flatten parsed JSON into nodes in depth-first display order.

    - every object becomes a node whose rows are its members
    - arrays have no node of their own (except at the root); each element
      becomes a node, scalars as a single unkeyed row
    """
    nodes: list[NodeData] = []

    def add(path: JsonPath, rows: tuple[Row, ...]) -> None:
        nodes.append(NodeData(str(len(nodes) + 1), path, rows))

    def visit(value: object, path: JsonPath) -> None:
        if isinstance(value, dict):
            add(path, tuple(_row_for(k, v) for k, v in value.items()))
            for k, v in value.items():
                if isinstance(v, dict):
                    visit(v, path + (k,))
                elif isinstance(v, list):
                    visit_elements(v, path + (k,))
        elif isinstance(value, list):
            visit_elements(value, path)
        else:
            add(path, (_row_for(None, value),))

    def visit_elements(items: list, path: JsonPath) -> None:
        for i, item in enumerate(items):
            if isinstance(item, list):
                add(path + (i,), ())
                visit_elements(item, path + (i,))
            else:
                visit(item, path + (i,))

    if isinstance(data, list):
        add((), ())
        visit_elements(data, ())
    else:
        visit(data, ())
    return nodes


class GraphStore:
    """Selection provider: holds the node set and the selected node."""

    def __init__(self) -> None:
        self._nodes: list[NodeData] = []
        self._selected: NodeData | None = None
        self._listeners: list[Callable[[NodeData | None], None]] = []

    def current_selection(self) -> NodeData | None:
        return self._selected

    def all_nodes(self) -> list[NodeData]:
        return list(self._nodes)

    def set_selection(self, node: NodeData | None) -> None:
        self._selected = node
        for listener in list(self._listeners):
            listener(node)

    def subscribe(
        self, listener: Callable[[NodeData | None], None]
    ) -> Callable[[], None]:
        """Register a selection listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def rebuild(self, text: str) -> bool:
        """Rebuild nodes from document text. Keeps the old set on bad JSON."""
        try:
            data = loads_strict(text)
        except (json.JSONDecodeError, ValueError, RecursionError) as exc:
            _LOG.warning("cannot rebuild nodes: %s", exc)
            return False
        self._nodes = build_nodes(data)
        _LOG.debug("rebuilt %d node(s)", len(self._nodes))
        return True
