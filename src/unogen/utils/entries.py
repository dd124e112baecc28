"""Normalization and rendering of CSS entries."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from unogen.constants.generator import CONTROL_KEY_PREFIX
from unogen.types import CSSEntries, CSSScalar


def normalize_css_entries(value: Any) -> str | CSSEntries | None:
    """Normalize a CSS object or entry list; ``None`` when the shape is unusable."""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        pairs = list(value.items())
    elif isinstance(value, (list, tuple)):
        pairs = list(value)
    else:
        return None

    entries: CSSEntries = []
    for pair in pairs:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2 or not isinstance(pair[0], str):
            return None
        key, item = pair
        if item is None:
            continue
        if isinstance(item, bool) or not isinstance(item, (str, int, float)):
            return None
        entries.append((key, item))
    return entries


def clear_identical_entries(entries: CSSEntries) -> CSSEntries:
    """Drop control keys and entries that repeat an earlier identical pair."""
    cleaned: CSSEntries = []
    seen: set[tuple[str, CSSScalar]] = set()
    for key, value in entries:
        if key.startswith(CONTROL_KEY_PREFIX):
            continue
        if (key, value) in seen:
            continue
        seen.add((key, value))
        cleaned.append((key, value))
    return cleaned


def format_css_value(value: CSSScalar) -> str:
    """Render a scalar; integral floats drop the trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def entries_to_css(entries: CSSEntries | None) -> str:
    """Render entries as a declaration body (``key:value;`` pairs)."""
    if not entries:
        return ""
    return "".join(
        f"{key}:{format_css_value(value)};" for key, value in clear_identical_entries(entries) if value is not None
    )
