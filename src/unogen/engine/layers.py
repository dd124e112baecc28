"""Merge, sort and render stringified utilities into layered CSS."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from unogen.config.model import ResolvedConfig
from unogen.constants.generator import LAYER_DEFAULT, PARENT_SEPARATOR, SCOPE_PLACEHOLDER
from unogen.exceptions import UnoError
from unogen.model import StringifiedUtil

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerateResult:
    """Rendered stylesheet for one ``generate`` call."""

    layers: tuple[str, ...]
    layer_css: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    matched: frozenset[str] = frozenset()
    failures: Mapping[str, UnoError] = field(default_factory=lambda: MappingProxyType({}))
    minify: bool = False

    @property
    def css(self) -> str:
        """All layers, concatenated in sorted order."""
        return self.get_layers()

    def get_layer(self, name: str) -> str | None:
        """Rendered text of layer *name*, or ``None`` when empty or unknown."""
        return self.layer_css.get(name) or None

    def get_layers(self, includes: Iterable[str] | None = None, excludes: Iterable[str] | None = None) -> str:
        """Join a subset of layers, keeping the sorted layer order."""
        included = None if includes is None else set(includes)
        excluded = set(excludes or ())
        blocks = [
            self.layer_css[name]
            for name in self.layers
            if (included is None or name in included) and name not in excluded and self.layer_css.get(name)
        ]
        return ("" if self.minify else "\n").join(blocks)


def sort_layer_names(names: Iterable[str], config: ResolvedConfig) -> list[str]:
    """Numeric ``layers`` order first, then name; a custom sorter runs last."""
    ordered = sorted(set(names), key=lambda name: (config.layers.get(name, 0), name))
    if config.sort_layers is not None:
        ordered = list(config.sort_layers(ordered))
    return ordered


def apply_scope(selector: str, scope: str | None) -> str:
    """Place *scope* at the placeholder, or in front of the selector."""
    if SCOPE_PLACEHOLDER in selector:
        return selector.replace(SCOPE_PLACEHOLDER, f" {scope} " if scope else " ")
    return f"{scope} {selector}" if scope else selector


def _sort_key(util: StringifiedUtil) -> tuple[int, int, str, str]:
    return (util.index, util.sort, util.selector or "", util.body)


def _render_rules(utils: Sequence[StringifiedUtil], *, merge: bool, scope: str | None) -> list[str]:
    """Render one (layer, parent) block, merging identical bodies when allowed."""
    blocks: list[tuple[list[str] | None, str]] = []
    merged_at: dict[str, int] = {}
    for util in sorted(utils, key=_sort_key):
        if util.selector is None:
            blocks.append((None, util.body))
            continue
        selector = apply_scope(util.selector, scope)
        if merge and not util.merge_blocked:
            position = merged_at.get(util.body)
            if position is not None:
                selectors = blocks[position][0]
                if selectors is not None and selector not in selectors:
                    selectors.append(selector)
                continue
            merged_at[util.body] = len(blocks)
        blocks.append(([selector], util.body))

    rendered = [body if selectors is None else f"{','.join(selectors)}{{{body}}}" for selectors, body in blocks]
    return list(dict.fromkeys(rendered))


def _wrap_parent(parent: str, rules: list[str], minify: bool) -> str:
    newline = "" if minify else "\n"
    text = newline.join(rules)
    for segment in reversed(parent.split(PARENT_SEPARATOR)):
        text = f"{segment}{{{newline}{text}{newline}}}"
    return text


def render_layers(
    utils: Iterable[StringifiedUtil],
    config: ResolvedConfig,
    *,
    parent_orders: Mapping[str, int] | None = None,
    preflights: Mapping[str, Sequence[str]] | None = None,
    minify: bool = False,
    scope: str | None = None,
) -> tuple[list[str], dict[str, str]]:
    """Return sorted layer names and the rendered text of each layer."""
    parent_orders = parent_orders or {}
    preflights = preflights or {}
    newline = "" if minify else "\n"

    by_layer: dict[str, dict[str, list[StringifiedUtil]]] = {}
    for util in utils:
        layer = util.layer or LAYER_DEFAULT
        by_layer.setdefault(layer, {}).setdefault(util.parent or "", []).append(util)

    names = sort_layer_names([*by_layer, *(name for name, css in preflights.items() if css)], config)
    rendered: dict[str, str] = {}
    for name in names:
        lines: list[str] = [css for css in preflights.get(name, ()) if css]
        parents = by_layer.get(name, {})
        for parent in sorted(parents, key=lambda value: (value != "", parent_orders.get(value, 0), value)):
            rules = _render_rules(parents[parent], merge=config.merge_selectors, scope=scope)
            if not rules:
                continue
            if parent:
                lines.append(_wrap_parent(parent, rules, minify))
            else:
                lines.extend(rules)
        if not lines:
            continue
        if not minify:
            lines.insert(0, f"/* layer: {name} */")
        rendered[name] = newline.join(lines)

    logger.debug("Rendered %d layer(s): %s", len(rendered), ", ".join(rendered))
    return [name for name in names if name in rendered], rendered
