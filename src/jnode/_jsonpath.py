"""Path utilities shared by the merge, patch and reconcile modules."""

from __future__ import annotations

import json

JsonPath = tuple[str | int, ...]


def path_to_string(path: JsonPath | list | None) -> str:
    """Render a path as ``$["key"][0]``. Empty path is ``$``."""
    if not path:
        return "$"
    segments = [
        str(seg) if isinstance(seg, int) and not isinstance(seg, bool)
        else json.dumps(str(seg), ensure_ascii=False)
        for seg in path
    ]
    return "$[" + "][".join(segments) + "]"


def parse_path_string(text: str) -> JsonPath:
    """Parse ``$["a"][0]`` (or ``$.a[0]``) back into path segments.

    Supports:
    - $ (root)
    - ["key"] / ['key'] (quoted key)
    - [n] (array index)
    - .key (dotted key)
    """
    text = text.strip()
    if not text.startswith("$"):
        raise ValueError("JSONPath must start with $")

    rest = text[1:]
    segments: list[str | int] = []
    while rest:
        if rest.startswith("["):
            seg, rest = _bracket_segment(rest)
            segments.append(seg)
        elif rest.startswith("."):
            rest = rest[1:]
            end = len(rest)
            for i, ch in enumerate(rest):
                if ch in ".[":
                    end = i
                    break
            if end == 0:
                raise ValueError("Empty key after '.'")
            segments.append(rest[:end])
            rest = rest[end:]
        else:
            raise ValueError(f"Unexpected character: {rest[0]!r}")
    return tuple(segments)


def _bracket_segment(path: str) -> tuple[str | int, str]:
    """Extract one ``[...]`` segment. Returns (segment, remaining)."""
    inner = path[1:].lstrip()
    if inner[:1] == '"':
        try:
            key, end = json.decoder.scanstring(inner, 1)
        except json.JSONDecodeError as exc:
            raise ValueError("Unclosed string in bracket") from exc
        after = inner[end:].lstrip()
        if not after.startswith("]"):
            raise ValueError("Unclosed bracket")
        return key, after[1:]

    if inner[:1] == "'":
        end = inner.find("'", 1)
        if end == -1:
            raise ValueError("Unclosed string in bracket")
        after = inner[end + 1 :].lstrip()
        if not after.startswith("]"):
            raise ValueError("Unclosed bracket")
        return inner[1:end], after[1:]

    end = inner.find("]")
    if end == -1:
        raise ValueError("Unclosed bracket")
    index_str = inner[:end].strip()
    if not index_str.lstrip("-").isdigit():
        raise ValueError(f"Invalid index: {index_str!r}")
    return int(index_str), inner[end + 1 :]


def resolve_path(data: object, path: JsonPath | list) -> tuple[bool, object]:
    """Get the value at a given path in data.

    Returns (found, value); (False, None) when a segment does not resolve.
    """
    current = data
    for key in path:
        if isinstance(current, dict) and isinstance(key, str) and key in current:
            current = current[key]
        elif (
            isinstance(current, list)
            and isinstance(key, int)
            and not isinstance(key, bool)
        ):
            if 0 <= key < len(current):
                current = current[key]
            else:
                return False, None
        else:
            return False, None
    return True, current
