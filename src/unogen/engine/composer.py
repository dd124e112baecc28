"""Variant handler chain: rewrite selector, body and parent of a matched util.

The chain is an iterative fold in two passes. The forward pass applies each
handler's rewrites in ascending ``order`` and snapshots the context it
received. The backward pass lets handlers with a ``handle`` stage wrap what
the rest of the chain produced, innermost first.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from typing import TYPE_CHECKING

from unogen.model import (
    ParsedUtil,
    RawUtil,
    RuleMeta,
    StringifiedUtil,
    Util,
    UtilObject,
    VariantHandler,
    VariantHandlerContext,
)
from unogen.types import CSSEntries, CSSObject
from unogen.utils import entries_to_css, normalize_css_entries, to_escaped_selector

if TYPE_CHECKING:
    from unogen.engine.context import RuleContext
    from unogen.engine.generator import UnoGenerator


def _apply_handler(handler: VariantHandler, context: VariantHandlerContext) -> VariantHandlerContext:
    entries = context.entries
    if handler.body is not None:
        rewritten = handler.body(entries)
        if rewritten is not None:
            entries = rewritten

    selector = context.selector
    if handler.selector is not None:
        selector = handler.selector(selector, entries) or selector

    if isinstance(handler.parent, tuple):
        parent, parent_order = handler.parent
    else:
        parent, parent_order = handler.parent, None

    return context.evolve(
        entries=entries,
        selector=selector,
        parent=parent or context.parent,
        parent_order=parent_order if parent_order is not None else context.parent_order,
        layer=handler.layer or context.layer,
        sort=handler.sort if handler.sort is not None else context.sort,
        no_merge=handler.no_merge if handler.no_merge is not None else context.no_merge,
    )


def compose(handlers: Sequence[VariantHandler], seed: VariantHandlerContext) -> VariantHandlerContext:
    """Run *handlers* over *seed*; ties in ``order`` keep their collected order."""
    ordered = sorted(handlers, key=lambda handler: handler.order or 0)

    received: list[VariantHandlerContext] = []
    context = seed
    for handler in ordered:
        context = _apply_handler(handler, context)
        received.append(context)

    result = context
    for handler, seen in zip(reversed(ordered), reversed(received), strict=True):
        if handler.handle is not None:
            result = handler.handle(seen, result)
    return result


def apply_variants(
    generator: UnoGenerator,
    parsed: ParsedUtil,
    handlers: Sequence[VariantHandler] | None = None,
    raw: str | None = None,
) -> UtilObject:
    """Apply the variant chain to *parsed* and run configured postprocessors.

    The raw token is escaped once, here, when the selector is seeded.
    """
    chain = parsed.variant_handlers if handlers is None else handlers
    seed = VariantHandlerContext(
        selector=to_escaped_selector(parsed.raw if raw is None else raw),
        entries=list(parsed.entries),
    )
    result = compose(chain, seed)

    if result.parent is not None and result.parent_order is not None:
        generator.record_parent_order(result.parent, result.parent_order)

    util = UtilObject(
        selector=f"{result.prefix}{result.selector}{result.pseudo}",
        entries=result.entries,
        parent=result.parent,
        layer=result.layer,
        sort=result.sort,
        no_merge=result.no_merge,
    )
    for postprocess in generator.config.postprocess:
        postprocess(util)
    return util


def stringify_util(generator: UnoGenerator, parsed: Util | None, context: RuleContext) -> StringifiedUtil | None:
    """Turn a matched util into its cacheable string form."""
    if parsed is None:
        return None
    details = context if generator.config.details else None

    if isinstance(parsed, RawUtil):
        return StringifiedUtil(index=parsed.index, selector=None, body=parsed.css, meta=parsed.meta, context=details)

    util = apply_variants(generator, parsed)
    body = entries_to_css(util.entries)
    if not body:
        return None

    meta = parsed.meta or RuleMeta()
    meta = replace(
        meta,
        layer=util.layer if util.layer is not None else meta.layer,
        sort=util.sort if util.sort is not None else meta.sort,
    )
    return StringifiedUtil(
        index=parsed.index,
        selector=util.selector,
        body=body,
        parent=util.parent,
        meta=meta,
        context=details,
        no_merge=util.no_merge,
    )


def construct_css(
    context: RuleContext,
    body: CSSEntries | CSSObject | str,
    override_selector: str | None = None,
) -> str:
    """Render a full ``selector{body}`` rule under the context's variants."""
    normalized = normalize_css_entries(body)
    if isinstance(normalized, str):
        return normalized
    if not normalized:
        return ""

    util = apply_variants(
        context.generator,
        ParsedUtil(
            index=0,
            raw=override_selector or context.raw_selector,
            entries=normalized,
            variant_handlers=context.variant_handlers,
        ),
    )
    css_body = f"{util.selector}{{{entries_to_css(util.entries)}}}"
    if util.parent:
        return f"{util.parent}{{{css_body}}}"
    return css_body
