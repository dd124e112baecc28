"""Rule matching: residual token text to CSS entries."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from unogen.config.model import BlocklistRule
from unogen.engine.context import RuleContext
from unogen.engine.results import normalize_rule_result
from unogen.engine.variants import match_variants
from unogen.model import ParsedUtil, RawUtil, Util, VariantMatch
from unogen.utils import maybe_await, normalize_css_entries

if TYPE_CHECKING:
    from unogen.engine.generator import UnoGenerator

logger = logging.getLogger(__name__)


def is_blocked(blocklist: Iterable[BlocklistRule], token: str) -> bool:
    """Return True when *token* equals a string entry or matches a pattern entry."""
    for rule in blocklist:
        if isinstance(rule, str):
            if rule == token:
                return True
        elif rule.search(token) is not None:
            return True
    return False


async def parse_util(
    generator: UnoGenerator,
    target: VariantMatch | str,
    context: RuleContext,
    *,
    internal: bool = False,
) -> list[Util] | None:
    """Match the residual of *target* against static, then dynamic rules.

    The first dynamic rule whose pattern matches and whose handler yields a
    usable result wins. Empty or malformed results let scanning continue.
    Returns ``None`` when no rule matches.
    """
    variant_match = target if isinstance(target, VariantMatch) else await match_variants(generator, target)
    raw = variant_match.raw
    processed = variant_match.current
    handlers = variant_match.handlers
    config = generator.config

    static = config.rules_static_map.get(processed)
    if static is not None and (internal or not (static.meta is not None and static.meta.internal)):
        normalized = normalize_css_entries(static.body)
        if isinstance(normalized, str):
            context.record_rule(static)
            return [RawUtil(index=static.index, css=normalized, meta=static.meta)]
        if normalized:
            context.record_rule(static)
            return [
                ParsedUtil(
                    index=static.index,
                    raw=raw,
                    entries=normalized,
                    meta=static.meta,
                    variant_handlers=handlers,
                )
            ]
        logger.debug("Static rule '%s' produced no entries", static.key)

    context.variant_handlers = handlers
    for rule in config.rules_dynamic:
        meta = rule.meta
        if meta is not None and meta.internal and not internal:
            continue

        unprefixed = processed
        if meta is not None and meta.prefix:
            if not processed.startswith(meta.prefix):
                continue
            unprefixed = processed[len(meta.prefix) :]

        found = rule.pattern.search(unprefixed)
        if found is None:
            continue

        result = await maybe_await(rule.handler(found, context))
        values = normalize_rule_result(result, source=f"rule #{rule.index} {rule.pattern.pattern!r}")
        if not values:
            continue

        context.record_rule(rule)
        utils: list[Util] = []
        for value in values:
            if isinstance(value, str):
                utils.append(RawUtil(index=rule.index, css=value, meta=meta))
            else:
                utils.append(
                    ParsedUtil(index=rule.index, raw=raw, entries=value, meta=meta, variant_handlers=handlers)
                )
        return utils

    return None
