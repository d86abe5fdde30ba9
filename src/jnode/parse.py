"""Turn free-form edit text into a JSON value. Never fails."""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum, auto

_LOG = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^-?[0-9]+(\.[0-9]+)?$")


class ParseBranch(Enum):
    JSON = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    NULL = auto()
    STRING = auto()


@dataclass(frozen=True)
class ParseOutcome:
    value: object
    branch: ParseBranch


def _reject_constant(name: str) -> object:
    # json.loads accepts NaN/Infinity; strict JSON does not.
    raise ValueError(f"Invalid JSON constant: {name}")


def loads_strict(text: str) -> object:
    """json.loads without the NaN/Infinity extensions."""
    return json.loads(text, parse_constant=_reject_constant)


def _to_number(text: str) -> int | float | None:
    """None when the digits do not fit an int or a finite float."""
    try:
        value = float(text) if "." in text else int(text)
    except ValueError:
        # int() refuses strings over sys.get_int_max_str_digits()
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def parse_edit(text: str) -> ParseOutcome:
    """Parse edit text, reporting which fallback branch produced the value."""
    try:
        return ParseOutcome(loads_strict(text), ParseBranch.JSON)
    except (json.JSONDecodeError, ValueError, RecursionError):
        pass

    trimmed = text.strip()
    number = _to_number(trimmed) if _NUMBER_RE.match(trimmed) else None
    if number is not None:
        outcome = ParseOutcome(number, ParseBranch.NUMBER)
    elif trimmed in ("true", "false"):
        outcome = ParseOutcome(trimmed == "true", ParseBranch.BOOLEAN)
    elif trimmed == "null":
        outcome = ParseOutcome(None, ParseBranch.NULL)
    else:
        outcome = ParseOutcome(trimmed, ParseBranch.STRING)
    _LOG.debug("edit text is not JSON, parsed as %s", outcome.branch.name)
    return outcome


def parse_edit_text(text: str) -> object:
    return parse_edit(text).value
