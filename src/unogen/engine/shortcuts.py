"""Shortcut expansion and rendering of shortcut bodies."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from itertools import chain
from typing import TYPE_CHECKING, Any

from unogen.config.model import ShortcutValue
from unogen.constants.generator import (
    CONTROL_SHORTCUT_NO_MERGE,
    INLINE_ENTRY_INDEX,
    INLINE_ENTRY_RAW,
    SHORTCUT_MAX_DEPTH,
)
from unogen.engine.composer import apply_variants
from unogen.engine.context import RuleContext
from unogen.engine.rules import parse_util
from unogen.engine.variants import match_variants
from unogen.exceptions import ShortcutCycleError
from unogen.model import ParsedUtil, RawUtil, RuleMeta, StringifiedUtil, Util, VariantMatch
from unogen.types import CSSEntries
from unogen.utils import entries_to_css, expand_variant_group, maybe_await, normalize_css_entries

if TYPE_CHECKING:
    from unogen.engine.generator import UnoGenerator

logger = logging.getLogger(__name__)

type Expansion = tuple[list[ShortcutValue], RuleMeta | None]


async def expand_shortcut(
    generator: UnoGenerator,
    token: str,
    context: RuleContext,
    depth: int = SHORTCUT_MAX_DEPTH,
    path: tuple[str, ...] = (),
) -> Expansion | None:
    """Expand *token* into its utilities, recursively and in listed order.

    Returns ``None`` when *token* is not a shortcut. Past *depth* levels a
    token is left unexpanded. Raises ShortcutCycleError when a shortcut
    reappears on its own expansion path, including at the depth cutoff; a
    cycle longer than the depth bound is truncated instead.
    """
    if depth <= 0:
        if token in path and (await _lookup_shortcut(generator, token, context))[0] is not None:
            raise ShortcutCycleError(token, path)
        return None

    result, meta = await _lookup_shortcut(generator, token, context)
    if result is not None and token in path:
        raise ShortcutCycleError(token, path)

    if isinstance(result, str):
        result = expand_variant_group(result.strip()).split()

    if not result:
        stripped = await match_variants(generator, token)
        if stripped.stripped:
            inner = await expand_shortcut(generator, stripped.current, context, depth - 1, (*path, token))
            if inner is not None:
                result = [
                    token.replace(stripped.current, item, 1) if isinstance(item, str) else item for item in inner[0]
                ]

    if not result:
        return None

    next_path = (*path, token)
    expanded: list[ShortcutValue] = []
    for item in result:
        if isinstance(item, str):
            nested = await expand_shortcut(generator, item, context, depth - 1, next_path)
            if nested is not None:
                expanded.extend(nested[0])
                continue
        expanded.append(item)
    return expanded, meta


async def _lookup_shortcut(
    generator: UnoGenerator,
    token: str,
    context: RuleContext,
) -> tuple[str | list[ShortcutValue] | None, RuleMeta | None]:
    """Static map first, then dynamic shortcuts in declaration order."""
    config = generator.config

    static = config.shortcuts_static_map.get(token)
    if static is not None:
        context.record_shortcut(static)
        value = static.value if isinstance(static.value, str) else list(static.value)
        return value, static.meta

    for shortcut in config.shortcuts_dynamic:
        meta = shortcut.meta
        unprefixed = token
        if meta is not None and meta.prefix:
            if not token.startswith(meta.prefix):
                continue
            unprefixed = token[len(meta.prefix) :]

        found = shortcut.pattern.search(unprefixed)
        if found is None:
            continue
        result = _normalize_shortcut_result(await maybe_await(shortcut.handler(found, context)), shortcut.index)
        if result:
            context.record_shortcut(shortcut)
            return result, meta

    return None, None


def _normalize_shortcut_result(value: Any, index: int) -> str | list[ShortcutValue] | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(item, (str, dict, list)) for item in value):
        return list(value)
    logger.debug("Shortcut #%d returned an unsupported value: %r", index, value)
    return None


def _unique(items: list[ShortcutValue]) -> list[ShortcutValue]:
    seen: set[str] = set()
    unique: list[ShortcutValue] = []
    for item in items:
        if isinstance(item, str):
            if item in seen:
                continue
            seen.add(item)
        unique.append(item)
    return unique


@dataclass
class _ShortcutGroup:
    index: int
    members: list[tuple[CSSEntries, bool, int]] = field(default_factory=list)


async def stringify_shortcuts(
    generator: UnoGenerator,
    parent: VariantMatch,
    context: RuleContext,
    expanded: list[ShortcutValue],
    meta: RuleMeta | None = None,
) -> list[StringifiedUtil]:
    """Render an expanded shortcut under the shortcut's own selector.

    Sub-utilities resolve in listed order; entries sharing a selector and
    parent are concatenated into one body.
    """
    config = generator.config
    meta = meta or RuleMeta(layer=config.shortcuts_layer)
    details = context if config.details else None

    parsed: list[Util] = []
    for item in _unique(expanded):
        if isinstance(item, str):
            result = await parse_util(generator, item, context, internal=True)
            if result is None:
                logger.warning('unmatched utility "%s" in shortcut "%s"', item, parent.current)
                continue
            parsed.extend(result)
            continue
        entries = normalize_css_entries(item)
        if entries and not isinstance(entries, str):
            parsed.append(ParsedUtil(index=INLINE_ENTRY_INDEX, raw=INLINE_ENTRY_RAW, entries=entries))

    stringified: list[StringifiedUtil] = []
    groups: dict[tuple[str, str | None, str | None], _ShortcutGroup] = {}
    for util in parsed:
        if isinstance(util, RawUtil):
            stringified.append(
                StringifiedUtil(index=util.index, selector=None, body=util.css, meta=util.meta, context=details)
            )
            continue
        composed = apply_variants(
            generator,
            util,
            [*parent.handlers, *util.variant_handlers],
            parent.raw,
        )
        no_merge = composed.no_merge if composed.no_merge is not None else bool(util.meta and util.meta.no_merge)
        group = groups.setdefault((composed.selector, composed.parent, composed.layer), _ShortcutGroup(util.index))
        group.members.append((composed.entries, no_merge, composed.sort or 0))

    for (selector, parent_selector, layer), group in groups.items():
        group_meta = meta if layer is None else replace(meta, layer=layer)
        for no_merge in (True, False):
            members = [(entries, sort) for entries, flag, sort in group.members if flag is no_merge]
            separate = [member for member in members if _has_no_merge_control(member[0])]
            joined = [member for member in members if not _has_no_merge_control(member[0])]
            for subset, flatten in ((separate, False), (joined, True)):
                stringified.extend(
                    _stringify_group(
                        subset,
                        flatten=flatten,
                        index=group.index,
                        selector=selector,
                        parent=parent_selector,
                        meta=replace(group_meta, no_merge=no_merge),
                        context=details,
                    )
                )
    return stringified


def _has_no_merge_control(entries: CSSEntries) -> bool:
    return any(key == CONTROL_SHORTCUT_NO_MERGE for key, _ in entries)


def _stringify_group(
    members: list[tuple[CSSEntries, int]],
    *,
    flatten: bool,
    index: int,
    selector: str,
    parent: str | None,
    meta: RuleMeta,
    context: RuleContext | None,
) -> list[StringifiedUtil]:
    if not members:
        return []
    max_sort = max(sort for _, sort in members)
    entries_list = [entries for entries, _ in members]
    bodies = [list(chain.from_iterable(entries_list))] if flatten else entries_list

    stringified: list[StringifiedUtil] = []
    for entries in bodies:
        body = entries_to_css(entries)
        if body:
            stringified.append(
                StringifiedUtil(
                    index=index,
                    selector=selector,
                    body=body,
                    parent=parent,
                    meta=replace(meta, sort=max_sort),
                    context=context,
                )
            )
    return stringified
