"""Generator facade: token resolution, caching and stylesheet generation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from types import MappingProxyType

from unogen.config import ResolvedConfig, UserConfig, resolve_config
from unogen.engine.cache import TokenCache, build_cache_key
from unogen.engine.composer import apply_variants, stringify_util
from unogen.engine.context import PreflightContext, RuleContext
from unogen.engine.layers import GenerateResult, render_layers
from unogen.engine.rules import is_blocked, parse_util
from unogen.engine.shortcuts import expand_shortcut, stringify_shortcuts
from unogen.engine.variants import match_variants
from unogen.exceptions import TokenResolutionError, UnoError
from unogen.model import ParsedUtil, RuleMeta, StringifiedUtil, UtilObject, VariantHandler, VariantMatch
from unogen.utils import maybe_await

logger = logging.getLogger(__name__)

type TokenResult = tuple[StringifiedUtil, ...] | None


class UnoGenerator:
    """Resolve utility tokens against a config and render them as CSS.

    One instance owns one resolved config, its token cache and the
    parent-order table. Reloading the config invalidates both.
    """

    def __init__(self, config: UserConfig | None = None, defaults: UserConfig | None = None) -> None:
        self._cache = TokenCache()
        self._parent_orders: dict[str, int] = {}
        self.user_config = config
        self.defaults = defaults
        self.config: ResolvedConfig = resolve_config(config, defaults)

    @property
    def cache(self) -> TokenCache:
        return self._cache

    @property
    def parent_orders(self) -> Mapping[str, int]:
        """Recorded ``parent -> order`` pairs, read-only."""
        return MappingProxyType(self._parent_orders)

    def set_config(self, config: UserConfig | None = None, defaults: UserConfig | None = None) -> None:
        """Reload the config, dropping every cached token and parent order."""
        self.user_config = config
        if defaults is not None:
            self.defaults = defaults
        self.config = resolve_config(config, self.defaults)
        self._cache.reset()
        self._parent_orders.clear()
        logger.info(
            "Config reloaded: %d rules, %d variants (cache generation %d)",
            self.config.rules_size,
            len(self.config.variants),
            self._cache.generation,
        )

    def record_parent_order(self, parent: str, order: int) -> None:
        self._parent_orders[parent] = order

    async def match_variants(self, raw: str, current: str | None = None) -> VariantMatch:
        return await match_variants(self, raw, current)

    def apply_variants(
        self,
        parsed: ParsedUtil,
        handlers: Iterable[VariantHandler] | None = None,
        raw: str | None = None,
    ) -> UtilObject:
        return apply_variants(self, parsed, None if handlers is None else tuple(handlers), raw)

    async def parse_token(self, raw: str, alias: str | None = None, *, scope: str | None = None) -> TokenResult:
        """Resolve one token to its stringified utilities, or ``None``.

        *alias* replaces the token as the selector source. Results, misses
        included, are cached per ``(raw, alias, scope)``. Matcher failures
        raise TokenResolutionError and are never cached.
        """
        key = build_cache_key(raw, alias, scope)
        if key in self._cache:
            return self._cache.get(key)

        generation = self._cache.generation
        try:
            result = await self._resolve_token(raw, alias)
        except UnoError:
            raise
        except Exception as exc:
            raise TokenResolutionError(raw, f'Failed to resolve "{raw}": {exc}') from exc

        self._cache.store(key, result, generation=generation)
        return result

    async def _resolve_token(self, raw: str, alias: str | None) -> TokenResult:
        config = self.config

        current: str | None = raw
        for preprocess in config.preprocess:
            current = preprocess(current)
            if not current:
                return None

        if is_blocked(config.blocklist, current):
            self._warn_blocked(raw)
            return None

        variant_match = await self.match_variants(current)
        if is_blocked(config.blocklist, variant_match.current):
            self._warn_blocked(raw)
            return None

        details = config.details
        context = RuleContext(
            raw_selector=current,
            current_selector=variant_match.current,
            generator=self,
            theme=config.theme,
            variant_match=variant_match,
            variant_handlers=variant_match.handlers,
            rules=[] if details else None,
            shortcuts=[] if details else None,
            variants=[variant for variant in config.variants if variant.index in variant_match.variants]
            if details
            else None,
        )
        target = variant_match if alias is None else replace(variant_match, raw=alias)

        expanded = await expand_shortcut(self, variant_match.current, context)
        if expanded is not None:
            items, meta = expanded
            utils = await stringify_shortcuts(
                self,
                target,
                context,
                items,
                meta or RuleMeta(layer=config.shortcuts_layer),
            )
        else:
            parsed = await parse_util(self, target, context)
            utils = [util for item in parsed or () if (util := stringify_util(self, item, context)) is not None]

        return tuple(utils) or None

    def _warn_blocked(self, raw: str) -> None:
        if self.config.warn:
            logger.warning('"%s" is in the blocklist and excluded from the output', raw)

    async def apply_extractors(self, code: str, source_id: str | None = None) -> list[str]:
        """Run every configured extractor over *code*, keeping first-seen order."""
        tokens: dict[str, None] = {}
        for extractor in self.config.extractors:
            found = await maybe_await(extractor(code))
            tokens.update(dict.fromkeys(found or ()))
        logger.debug("Extracted %d candidate token(s) from %s", len(tokens), source_id or "<input>")
        return list(tokens)

    async def generate(
        self,
        tokens_or_text: str | Iterable[str] = "",
        *,
        preflights: bool = True,
        safelist: bool = True,
        minify: bool = False,
        scope: str | None = None,
        source_id: str | None = None,
    ) -> GenerateResult:
        """Resolve every token concurrently, then render the stylesheet.

        Per-token failures are logged and reported in ``failures``; the
        rest of the batch still renders.
        """
        config = self.config
        if isinstance(tokens_or_text, str):
            tokens = await self.apply_extractors(tokens_or_text, source_id)
        else:
            tokens = list(tokens_or_text)
        if safelist:
            tokens.extend(config.safelist)
        tokens = list(dict.fromkeys(tokens))

        results = await asyncio.gather(
            *(self.parse_token(token, scope=scope) for token in tokens),
            return_exceptions=True,
        )

        matched: list[str] = []
        utils: list[StringifiedUtil] = []
        failures: dict[str, UnoError] = {}
        for token, result in zip(tokens, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, UnoError):
                    raise result
                logger.warning("Skipping %s: %s", token, result)
                failures[token] = result
                continue
            if result:
                matched.append(token)
                utils.extend(result)

        preflight_css = await self._collect_preflights(config) if preflights else {}
        layers, rendered = render_layers(
            utils,
            config,
            parent_orders=self._parent_orders,
            preflights=preflight_css,
            minify=minify,
            scope=scope,
        )
        logger.debug("Generated %d utilities from %d token(s)", len(utils), len(tokens))
        return GenerateResult(
            layers=tuple(layers),
            layer_css=MappingProxyType(rendered),
            matched=frozenset(matched),
            failures=MappingProxyType(failures),
            minify=minify,
        )

    async def _collect_preflights(self, config: ResolvedConfig) -> dict[str, list[str]]:
        context = PreflightContext(generator=self, theme=config.theme)
        collected: dict[str, list[str]] = {}
        for preflight in config.preflights:
            css = await maybe_await(preflight.get_css(context))
            if css:
                collected.setdefault(preflight.layer, []).append(css.strip())
        return collected


def create_generator(config: UserConfig | None = None, defaults: UserConfig | None = None) -> UnoGenerator:
    """Build a generator for *config* layered over *defaults*."""
    return UnoGenerator(config, defaults)
