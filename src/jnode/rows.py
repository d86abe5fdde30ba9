"""Node rows and their editable text form."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class RowType(Enum):
    SCALAR = "scalar"
    ARRAY = "array"
    OBJECT = "object"


@dataclass(frozen=True)
class Row:
    """One displayable key/value unit of a node.

    ``key`` is None for unkeyed rows (array elements, root scalars).
    For ARRAY/OBJECT rows ``value`` holds the child count.
    """

    key: str | None
    value: object
    type: RowType = RowType.SCALAR


def format_scalar(value: object) -> str:
    """Render a scalar as raw text (strings are not quoted)."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def normalize_rows(rows: Iterable[Row] | None) -> str:
    """Flatten rows into the text shown in the editor.

    - no rows          -> "{}"
    - one unkeyed row  -> the raw value
    - otherwise        -> keyed scalar rows as a pretty-printed object
    """
    rows = list(rows or ())
    if not rows:
        return "{}"
    if len(rows) == 1 and not rows[0].key:
        return format_scalar(rows[0].value)

    obj: dict[str, object] = {}
    for row in rows:
        if row.type in (RowType.ARRAY, RowType.OBJECT):
            continue
        if row.key:
            obj[row.key] = row.value
    return json.dumps(obj, indent=2, ensure_ascii=False)
