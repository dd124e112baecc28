"""Cross-module type aliases."""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from typing import Any

type CSSScalar = str | int | float | None
type CSSEntry = tuple[str, CSSScalar]
type CSSEntries = list[CSSEntry]
type CSSObject = dict[str, CSSScalar]
type CSSValue = CSSObject | CSSEntries
type CSSValues = CSSValue | str | list[CSSValue | str]

type MaybeAwaitable[T] = T | Awaitable[T]

type Theme = Mapping[str, Any]

type JsonScalar = str | int | float | bool | None
type JsonValue = JsonScalar | list["JsonValue"] | dict[str, "JsonValue"]
type JsonObject = dict[str, JsonValue]
