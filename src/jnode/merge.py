"""Decide what value gets written back at a node's path."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum, auto

from ._jsonpath import JsonPath, resolve_path
from .parse import loads_strict

_LOG = logging.getLogger(__name__)


class MergeDecision(Enum):
    MERGED = auto()  # 기존 object에 shallow merge
    REPLACED = auto()  # 기존 값과 종류가 달라 그대로 교체
    MISSING = auto()  # path에 기존 값 없음
    UNPARSEABLE = auto()  # 원본 문서 파싱 실패


@dataclass(frozen=True)
class MergeOutcome:
    value: object
    decision: MergeDecision


def _is_object(value: object) -> bool:
    return isinstance(value, dict)


def resolve_merge(
    document: str, path: JsonPath, candidate: object
) -> MergeOutcome:
    """Shallow-merge an object edit into the existing object at path.

    Object members that are not shown as rows (nested objects and arrays)
    survive the edit this way. Anything else replaces the existing value.
    """
    try:
        data = loads_strict(document)
    except (json.JSONDecodeError, ValueError, RecursionError):
        _LOG.debug("document does not parse, replacing value verbatim")
        return MergeOutcome(candidate, MergeDecision.UNPARSEABLE)

    found, existing = resolve_path(data, path)
    if not found:
        return MergeOutcome(candidate, MergeDecision.MISSING)

    if _is_object(existing) and _is_object(candidate):
        merged = dict(existing)
        merged.update(candidate)
        return MergeOutcome(merged, MergeDecision.MERGED)
    return MergeOutcome(candidate, MergeDecision.REPLACED)


def resolve_value(document: str, path: JsonPath, candidate: object) -> object:
    return resolve_merge(document, path, candidate).value
