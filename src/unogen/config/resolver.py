"""Normalize a UserConfig into an immutable ResolvedConfig.

Shape errors are programmer errors: they raise ConfigError here, at
construction time, and never during generation.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from unogen.config.model import (
    BlocklistRule,
    DynamicRule,
    DynamicShortcut,
    ResolvedConfig,
    StaticRule,
    StaticShortcut,
    UserConfig,
    VariantObject,
)
from unogen.constants.generator import DEFAULT_LAYERS, LAYER_SHORTCUTS
from unogen.exceptions import ConfigError
from unogen.model import RuleMeta
from unogen.utils.extract import extract_split

logger = logging.getLogger(__name__)


def merge_user_configs(*configs: UserConfig | None) -> UserConfig:
    """Layer configs left to right: lists concatenate, later scalars win."""
    merged = UserConfig()
    for config in configs:
        if config is None:
            continue
        merged.rules.extend(config.rules)
        merged.shortcuts = _merge_shortcut_inputs(merged.shortcuts, config.shortcuts)
        merged.variants.extend(config.variants)
        merged.blocklist.extend(config.blocklist)
        merged.safelist.extend(config.safelist)
        merged.extractors.extend(config.extractors)
        merged.preflights.extend(config.preflights)
        merged.preprocess.extend(config.preprocess)
        merged.postprocess.extend(config.postprocess)
        merged.theme = _merge_theme(merged.theme, config.theme)
        merged.layers.update(config.layers)
        if config.sort_layers is not None:
            merged.sort_layers = config.sort_layers
        if config.shortcuts_layer is not None:
            merged.shortcuts_layer = config.shortcuts_layer
        if config.merge_selectors is not None:
            merged.merge_selectors = config.merge_selectors
        if config.warn is not None:
            merged.warn = config.warn
        if config.details is not None:
            merged.details = config.details
    return merged


def resolve_config(config: UserConfig | None = None, defaults: UserConfig | None = None) -> ResolvedConfig:
    """Resolve *config* layered over *defaults* into a ResolvedConfig."""
    merged = merge_user_configs(defaults, config)

    rules_static: dict[str, StaticRule] = {}
    rules_dynamic: list[DynamicRule] = []
    for index, rule in enumerate(merged.rules):
        resolved = _resolve_rule(rule, index)
        if isinstance(resolved, StaticRule):
            rules_static[resolved.key] = resolved
        else:
            rules_dynamic.append(resolved)

    shortcuts_static: dict[str, StaticShortcut] = {}
    shortcuts_dynamic: list[DynamicShortcut] = []
    for index, shortcut in enumerate(_shortcut_entries(merged.shortcuts)):
        resolved_shortcut = _resolve_shortcut(shortcut, index)
        if isinstance(resolved_shortcut, StaticShortcut):
            # First declaration wins for static shortcuts.
            shortcuts_static.setdefault(resolved_shortcut.key, resolved_shortcut)
        else:
            shortcuts_dynamic.append(resolved_shortcut)

    variants = tuple(_resolve_variant(variant, index) for index, variant in enumerate(merged.variants))

    layers = dict(DEFAULT_LAYERS)
    layers.update(_ensure_layers(merged.layers))

    resolved_config = ResolvedConfig(
        rules_static_map=MappingProxyType(rules_static),
        rules_dynamic=tuple(rules_dynamic),
        rules_size=len(merged.rules),
        shortcuts_static_map=MappingProxyType(shortcuts_static),
        shortcuts_dynamic=tuple(shortcuts_dynamic),
        variants=variants,
        blocklist=tuple(_resolve_blocklist_rule(item) for item in merged.blocklist),
        safelist=tuple(dict.fromkeys(_ensure_strings(merged.safelist, "safelist"))),
        extractors=tuple(merged.extractors) or (extract_split,),
        preflights=tuple(merged.preflights),
        preprocess=tuple(_ensure_callables(merged.preprocess, "preprocess")),
        postprocess=tuple(_ensure_callables(merged.postprocess, "postprocess")),
        theme=MappingProxyType(dict(merged.theme)),
        layers=MappingProxyType(layers),
        sort_layers=merged.sort_layers,
        shortcuts_layer=merged.shortcuts_layer or LAYER_SHORTCUTS,
        merge_selectors=True if merged.merge_selectors is None else merged.merge_selectors,
        warn=True if merged.warn is None else merged.warn,
        details=bool(merged.details),
    )
    logger.debug(
        "Resolved config: %d static rules, %d dynamic rules, %d shortcuts, %d variants",
        len(rules_static),
        len(rules_dynamic),
        len(shortcuts_static) + len(shortcuts_dynamic),
        len(variants),
    )
    return resolved_config


def _resolve_rule(rule: Any, index: int) -> StaticRule | DynamicRule:
    key, value, meta = _split_entry(rule, "rule", index)
    if callable(value):
        return DynamicRule(index=index, pattern=_compile(key, "rule", index), handler=value, meta=meta)
    if not isinstance(key, str):
        raise ConfigError(f"rule #{index}: static rule key must be a string, got {type(key).__name__}")
    if not isinstance(value, (str, dict, list, tuple)):
        raise ConfigError(f"rule #{index} '{key}': body must be CSS entries, a CSS object or a string")
    prefix = meta.prefix if meta is not None and meta.prefix else ""
    body = list(value) if isinstance(value, tuple) else value
    return StaticRule(index=index, key=f"{prefix}{key}", body=body, meta=meta)


def _resolve_shortcut(shortcut: Any, index: int) -> StaticShortcut | DynamicShortcut:
    key, value, meta = _split_entry(shortcut, "shortcut", index)
    if callable(value):
        return DynamicShortcut(index=index, pattern=_compile(key, "shortcut", index), handler=value, meta=meta)
    if not isinstance(key, str):
        raise ConfigError(f"shortcut #{index}: static shortcut key must be a string")
    if isinstance(value, str):
        resolved_value: str | tuple[Any, ...] = value
    elif isinstance(value, (list, tuple)) and all(isinstance(item, (str, dict, list)) for item in value):
        resolved_value = tuple(value)
    else:
        raise ConfigError(f"shortcut #{index} '{key}': value must be a string or a list of utilities")
    prefix = meta.prefix if meta is not None and meta.prefix else ""
    return StaticShortcut(index=index, key=f"{prefix}{key}", value=resolved_value, meta=meta)


def _resolve_variant(variant: Any, index: int) -> VariantObject:
    if isinstance(variant, VariantObject):
        if not callable(variant.match):
            raise ConfigError(f"variant #{index}: match must be callable")
        return VariantObject(
            match=variant.match,
            name=variant.name,
            multi_pass=variant.multi_pass,
            order=variant.order,
            index=index,
        )
    if callable(variant):
        return VariantObject(match=variant, name=getattr(variant, "__name__", None), index=index)
    raise ConfigError(f"variant #{index}: expected a VariantObject or a callable, got {type(variant).__name__}")


def _resolve_blocklist_rule(item: Any) -> BlocklistRule:
    if isinstance(item, (str, re.Pattern)):
        return item
    raise ConfigError(f"blocklist entries must be strings or compiled patterns, got {type(item).__name__}")


def _split_entry(entry: Any, kind: str, index: int) -> tuple[Any, Any, RuleMeta | None]:
    """Split a ``(key, value[, meta])`` tuple, validating its arity."""
    if not isinstance(entry, (tuple, list)) or len(entry) not in (2, 3):
        raise ConfigError(f"{kind} #{index}: expected (key, value) or (key, value, meta)")
    meta = entry[2] if len(entry) == 3 else None
    if meta is not None and not isinstance(meta, RuleMeta):
        raise ConfigError(f"{kind} #{index}: meta must be a RuleMeta, got {type(meta).__name__}")
    return entry[0], entry[1], meta


def _compile(key: Any, kind: str, index: int) -> re.Pattern[str]:
    if isinstance(key, re.Pattern):
        return key
    if isinstance(key, str):
        try:
            return re.compile(key)
        except re.error as exc:
            raise ConfigError(f"{kind} #{index}: invalid pattern {key!r}: {exc}") from exc
    raise ConfigError(f"{kind} #{index}: dynamic {kind} needs a pattern, got {type(key).__name__}")


def _shortcut_entries(shortcuts: Any) -> list[Any]:
    if isinstance(shortcuts, Mapping):
        return list(shortcuts.items())
    if isinstance(shortcuts, (list, tuple)):
        return list(shortcuts)
    raise ConfigError("shortcuts must be a mapping or a list of shortcut tuples")


def _merge_shortcut_inputs(left: Any, right: Any) -> list[Any]:
    return [*_shortcut_entries(left), *_shortcut_entries(right)]


def _merge_theme(base: dict[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge theme mappings; non-mapping values in *patch* replace."""
    output = dict(base)
    for key, value in patch.items():
        current = output.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            output[key] = _merge_theme(dict(current), value)
        else:
            output[key] = value
    return output


def _ensure_layers(layers: Any) -> dict[str, int]:
    if not isinstance(layers, Mapping):
        raise ConfigError("layers must be a mapping of layer name to order")
    for name, order in layers.items():
        if not isinstance(name, str) or isinstance(order, bool) or not isinstance(order, int):
            raise ConfigError(f"layers.{name} must map a string name to an integer order")
    return dict(layers)


def _ensure_strings(values: Any, key_name: str) -> list[str]:
    if not isinstance(values, (list, tuple)) or not all(isinstance(item, str) for item in values):
        raise ConfigError(f"{key_name} must be a list of strings")
    return list(values)


def _ensure_callables(values: Any, key_name: str) -> list[Any]:
    if not all(callable(item) for item in values):
        raise ConfigError(f"{key_name} entries must be callable")
    return list(values)
