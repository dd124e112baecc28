"""Shared type aliases for unogen."""

from .common import (
    CSSEntries,
    CSSEntry,
    CSSObject,
    CSSScalar,
    CSSValue,
    CSSValues,
    JsonObject,
    JsonValue,
    MaybeAwaitable,
    Theme,
)

__all__ = [
    "CSSEntries",
    "CSSEntry",
    "CSSObject",
    "CSSScalar",
    "CSSValue",
    "CSSValues",
    "JsonObject",
    "JsonValue",
    "MaybeAwaitable",
    "Theme",
]
