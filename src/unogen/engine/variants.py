"""Variant stripping: peel variant prefixes off a token, recording handlers."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from unogen.config.model import VariantObject
from unogen.constants.generator import VARIANT_MAX_HANDLERS
from unogen.engine.context import VariantContext
from unogen.exceptions import TokenResolutionError
from unogen.model import VariantHandler, VariantMatch
from unogen.utils import maybe_await

if TYPE_CHECKING:
    from unogen.engine.generator import UnoGenerator

logger = logging.getLogger(__name__)


async def match_variants(generator: UnoGenerator, raw: str, current: str | None = None) -> VariantMatch:
    """Strip variants from *current* (default *raw*) until none applies.

    Each round offers the text to every variant in declaration order and
    applies the first match. A variant is used once per token unless it is
    ``multi_pass``. Handlers are returned in the order they matched.
    """
    variants = generator.config.variants
    context = VariantContext(raw_selector=raw, generator=generator, theme=generator.config.theme)
    handlers: list[VariantHandler] = []
    used: set[int] = set()
    processed = raw if current is None else current

    while True:
        applied = False
        for variant in variants:
            if not variant.multi_pass and variant.index in used:
                continue
            result = await maybe_await(variant.match(processed, context))
            handler = _to_handler(result, variant, processed)
            if handler is None:
                continue
            processed = handler.matcher
            handlers.append(handler)
            used.add(variant.index)
            applied = True
            break

        if not applied:
            break
        if len(handlers) > VARIANT_MAX_HANDLERS:
            raise TokenResolutionError(raw, f'Too many variants applied to "{raw}"')

    return VariantMatch(raw=raw, current=processed, handlers=tuple(handlers), variants=frozenset(used))


def _to_handler(result: Any, variant: VariantObject, processed: str) -> VariantHandler | None:
    # An unchanged string means the variant did not match.
    if result is None or result == "" or result == processed:
        return None
    if isinstance(result, str):
        return VariantHandler(matcher=result, order=variant.order)
    if isinstance(result, VariantHandler):
        if result.order is None and variant.order is not None:
            return replace(result, order=variant.order)
        return result
    logger.debug("Variant %s returned an unsupported value: %r", variant.name or variant.index, result)
    return None
