"""Config data model: user-facing input and the immutable resolved form."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from unogen.constants.generator import DEFAULT_LAYERS, LAYER_PREFLIGHTS, LAYER_SHORTCUTS
from unogen.model import RuleMeta, UtilObject, VariantHandler
from unogen.types import CSSValue, CSSValues, MaybeAwaitable

if TYPE_CHECKING:
    from unogen.engine.context import PreflightContext, RuleContext, VariantContext

type RuleHandler = Callable[[re.Match[str], RuleContext], MaybeAwaitable[CSSValues | None]]
type ShortcutValue = str | CSSValue
type ShortcutHandler = Callable[[re.Match[str], RuleContext], MaybeAwaitable[str | list[ShortcutValue] | None]]
type VariantMatcher = Callable[[str, VariantContext], MaybeAwaitable[str | VariantHandler | None]]
type Preprocessor = Callable[[str], str | None]
type Postprocessor = Callable[[UtilObject], None]
type Extractor = Callable[[str], Iterable[str]]
type LayerSorter = Callable[[list[str]], list[str]]
type BlocklistRule = str | re.Pattern[str]

# User-facing rule and shortcut shapes: (key, value) or (key, value, meta).
type RuleInput = tuple[Any, ...]
type ShortcutInput = tuple[Any, ...]


@dataclass(frozen=True)
class StaticRule:
    """Exact-match rule; ``key`` already includes any meta prefix."""

    index: int
    key: str
    body: CSSValue | str
    meta: RuleMeta | None = None


@dataclass(frozen=True)
class DynamicRule:
    """Pattern rule evaluated in declaration order."""

    index: int
    pattern: re.Pattern[str]
    handler: RuleHandler
    meta: RuleMeta | None = None


type Rule = StaticRule | DynamicRule


@dataclass(frozen=True)
class StaticShortcut:
    """Exact-match shortcut; ``key`` already includes any meta prefix."""

    index: int
    key: str
    value: str | tuple[ShortcutValue, ...]
    meta: RuleMeta | None = None


@dataclass(frozen=True)
class DynamicShortcut:
    """Pattern shortcut evaluated in declaration order."""

    index: int
    pattern: re.Pattern[str]
    handler: ShortcutHandler
    meta: RuleMeta | None = None


type Shortcut = StaticShortcut | DynamicShortcut


@dataclass(frozen=True)
class VariantObject:
    """A variant: strips part of a token and records a handler."""

    match: VariantMatcher
    name: str | None = None
    # Allows the variant to apply more than once to the same token.
    multi_pass: bool = False
    # Default handler order when the matched handler does not set one.
    order: int | None = None
    index: int = -1


@dataclass(frozen=True)
class Preflight:
    """Raw CSS injected at the top of a layer."""

    get_css: Callable[[PreflightContext], MaybeAwaitable[str | None]]
    layer: str = LAYER_PREFLIGHTS


@dataclass
class UserConfig:
    """Config as written by users and presets.

    ``None`` scalars mean "not set", so a config can be layered over
    defaults by :func:`unogen.config.resolve_config`.
    """

    rules: list[RuleInput] = field(default_factory=list)
    shortcuts: list[ShortcutInput] | Mapping[str, str | list[ShortcutValue]] = field(default_factory=list)
    variants: list[VariantObject | VariantMatcher] = field(default_factory=list)
    blocklist: list[BlocklistRule] = field(default_factory=list)
    safelist: list[str] = field(default_factory=list)
    extractors: list[Extractor] = field(default_factory=list)
    preflights: list[Preflight] = field(default_factory=list)
    preprocess: list[Preprocessor] = field(default_factory=list)
    postprocess: list[Postprocessor] = field(default_factory=list)
    theme: dict[str, Any] = field(default_factory=dict)
    layers: dict[str, int] = field(default_factory=dict)
    sort_layers: LayerSorter | None = None
    shortcuts_layer: str | None = None
    merge_selectors: bool | None = None
    warn: bool | None = None
    details: bool | None = None


@dataclass(frozen=True)
class ResolvedConfig:
    """Fully normalized config. Never mutated once built."""

    rules_static_map: Mapping[str, StaticRule] = field(default_factory=lambda: MappingProxyType({}))
    rules_dynamic: tuple[DynamicRule, ...] = ()
    rules_size: int = 0
    shortcuts_static_map: Mapping[str, StaticShortcut] = field(default_factory=lambda: MappingProxyType({}))
    shortcuts_dynamic: tuple[DynamicShortcut, ...] = ()
    variants: tuple[VariantObject, ...] = ()
    blocklist: tuple[BlocklistRule, ...] = ()
    safelist: tuple[str, ...] = ()
    extractors: tuple[Extractor, ...] = ()
    preflights: tuple[Preflight, ...] = ()
    preprocess: tuple[Preprocessor, ...] = ()
    postprocess: tuple[Postprocessor, ...] = ()
    theme: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    layers: Mapping[str, int] = field(default_factory=lambda: MappingProxyType(dict(DEFAULT_LAYERS)))
    sort_layers: LayerSorter | None = None
    shortcuts_layer: str = LAYER_SHORTCUTS
    merge_selectors: bool = True
    warn: bool = True
    details: bool = False

    @property
    def rules(self) -> tuple[Rule, ...]:
        """All rules in declaration order."""
        merged: list[Rule] = [*self.rules_static_map.values(), *self.rules_dynamic]
        return tuple(sorted(merged, key=lambda rule: rule.index))

    @property
    def shortcuts(self) -> tuple[Shortcut, ...]:
        """All shortcuts in declaration order."""
        merged: list[Shortcut] = [*self.shortcuts_static_map.values(), *self.shortcuts_dynamic]
        return tuple(sorted(merged, key=lambda shortcut: shortcut.index))
