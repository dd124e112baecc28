"""Classification of heterogeneous matcher results.

Rule handlers may return a CSS object, an entry list, a list of value
groups, a raw CSS string, or nothing. Each result is classified once into a
ResultKind; anything unrecognized counts as no match.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from unogen.types import CSSEntries
from unogen.utils import normalize_css_entries

logger = logging.getLogger(__name__)


class ResultKind(StrEnum):
    """Shape of a rule handler result."""

    NONE = "none"
    RAW = "raw"
    ENTRIES = "entries"
    GROUPS = "groups"


def _is_entry_pair(item: Any) -> bool:
    return (
        isinstance(item, (list, tuple))
        and len(item) == 2
        and isinstance(item[0], str)
        and not isinstance(item[1], (list, tuple, Mapping))
    )


def classify_result(value: Any) -> ResultKind:
    """Return the ResultKind for a handler result."""
    if value is None:
        return ResultKind.NONE
    if isinstance(value, str):
        return ResultKind.RAW if value else ResultKind.NONE
    if isinstance(value, Mapping):
        return ResultKind.ENTRIES if value else ResultKind.NONE
    if isinstance(value, (list, tuple)):
        if not value:
            return ResultKind.NONE
        if all(_is_entry_pair(item) for item in value):
            return ResultKind.ENTRIES
        return ResultKind.GROUPS
    return ResultKind.NONE


def normalize_rule_result(value: Any, *, source: str = "") -> list[str | CSSEntries]:
    """Normalize a handler result into raw strings and entry lists.

    Empty and malformed parts are dropped; an empty return means "no match".
    """
    kind = classify_result(value)
    if kind is ResultKind.NONE:
        if value is not None and value != "":
            logger.debug("Discarding malformed result from %s: %r", source or "matcher", value)
        return []
    if kind is ResultKind.RAW:
        return [value]
    if kind is ResultKind.ENTRIES:
        entries = normalize_css_entries(value)
        return [entries] if entries else []

    normalized: list[str | CSSEntries] = []
    for group in value:
        item = normalize_css_entries(group)
        if item is None:
            logger.debug("Discarding malformed group from %s: %r", source or "matcher", group)
            continue
        if item:
            normalized.append(item)
    return normalized
