"""Config loading from ``unogen.yaml``."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from unogen.config.model import BlocklistRule, Preflight, UserConfig
from unogen.config.resolver import merge_user_configs
from unogen.constants.config import (
    ALLOWED_CONFIG_KEYS,
    ALLOWED_PREFLIGHT_KEYS,
    BOOLEAN_CONFIG_KEYS,
    DEFAULT_PRESET,
    PRESET_BASIC,
    VALID_PRESETS,
)
from unogen.constants.generator import LAYER_PREFLIGHTS, REGEX_BLOCKLIST_DELIMITER
from unogen.exceptions import ConfigError
from unogen.presets import preset_basic

logger = logging.getLogger(__name__)


def load_config(path: Path | None = None, *, preset: str | None = None) -> UserConfig:
    """Load a YAML config and layer it over its preset.

    Without *path* only the preset is returned. *preset* overrides the
    file's own ``preset`` key.
    """
    raw: Any = {}
    if path is not None:
        path = path.resolve()
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc
        logger.debug("Loaded config from %s", path)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")

    config = parse_config(raw)
    preset_name = preset if preset is not None else raw.get("preset", DEFAULT_PRESET)
    if preset_name not in VALID_PRESETS:
        raise ConfigError(f"preset must be one of {sorted(VALID_PRESETS)}, got {preset_name!r}")
    if preset_name == PRESET_BASIC:
        return merge_user_configs(preset_basic(), config)
    return config


def parse_config(raw: dict[str, Any]) -> UserConfig:
    """Validate a YAML mapping and convert it into a UserConfig."""
    unknown = sorted(set(raw) - ALLOWED_CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

    config = UserConfig()
    for key in BOOLEAN_CONFIG_KEYS:
        value = raw.get(key)
        if value is None:
            continue
        if not isinstance(value, bool):
            raise ConfigError(f"{key} must be a boolean")
        setattr(config, key, value)

    shortcuts_layer = raw.get("shortcuts_layer")
    if shortcuts_layer is not None:
        if not isinstance(shortcuts_layer, str) or not shortcuts_layer.strip():
            raise ConfigError("shortcuts_layer must be a non-empty string")
        config.shortcuts_layer = shortcuts_layer

    config.layers = _ensure_layers(raw.get("layers"))
    config.rules = _parse_rules(raw.get("rules"))
    config.shortcuts = _parse_shortcuts(raw.get("shortcuts"))
    config.blocklist = [_parse_blocklist_entry(item) for item in _ensure_string_list(raw.get("blocklist"), "blocklist")]
    config.safelist = _ensure_string_list(raw.get("safelist"), "safelist")
    config.preflights = _parse_preflights(raw.get("preflights"))
    return config


def _ensure_string_list(value: Any, key_name: str) -> list[str]:
    """Coerce a value to a list of strings, raising ConfigError on type mismatch."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key_name} must be a list of strings")
    return list(value)


def _ensure_mapping(value: Any, key_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict) or not all(isinstance(key, str) for key in value):
        raise ConfigError(f"{key_name} must be a mapping")
    return value


def _ensure_layers(value: Any) -> dict[str, int]:
    layers = _ensure_mapping(value, "layers")
    for name, order in layers.items():
        if isinstance(order, bool) or not isinstance(order, int):
            raise ConfigError(f"layers.{name} must be an integer")
    return dict(layers)


def _parse_rules(value: Any) -> list[tuple[str, dict[str, str | int | float]]]:
    rules: list[tuple[str, dict[str, str | int | float]]] = []
    for name, body in _ensure_mapping(value, "rules").items():
        properties = _ensure_mapping(body, f"rules.{name}")
        if not properties:
            raise ConfigError(f"rules.{name} must declare at least one CSS property")
        for prop, css_value in properties.items():
            if isinstance(css_value, bool) or not isinstance(css_value, (str, int, float)):
                raise ConfigError(f"rules.{name}.{prop} must be a string or a number")
        rules.append((name, dict(properties)))
    return rules


def _parse_shortcuts(value: Any) -> list[tuple[str, str | list[str]]]:
    shortcuts: list[tuple[str, str | list[str]]] = []
    for name, expansion in _ensure_mapping(value, "shortcuts").items():
        if isinstance(expansion, str):
            shortcuts.append((name, expansion))
        else:
            shortcuts.append((name, _ensure_string_list(expansion, f"shortcuts.{name}")))
    return shortcuts


def _parse_blocklist_entry(item: str) -> BlocklistRule:
    """``/pattern/`` entries become regexes, anything else matches exactly."""
    delimiter = REGEX_BLOCKLIST_DELIMITER
    if len(item) > 2 and item.startswith(delimiter) and item.endswith(delimiter):
        try:
            return re.compile(item[1:-1])
        except re.error as exc:
            raise ConfigError(f"blocklist pattern {item!r} is invalid: {exc}") from exc
    return item


def _static_css(css: str) -> Callable[[Any], str]:
    def get_css(_context: Any) -> str:
        return css

    return get_css


def _parse_preflights(value: Any) -> list[Preflight]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("preflights must be a list of mappings")

    preflights: list[Preflight] = []
    for position, item in enumerate(value):
        entry = _ensure_mapping(item, f"preflights[{position}]")
        unknown = sorted(set(entry) - ALLOWED_PREFLIGHT_KEYS)
        if unknown:
            raise ConfigError(f"preflights[{position}] has unknown key(s): {', '.join(unknown)}")
        css = entry.get("css")
        if not isinstance(css, str) or not css.strip():
            raise ConfigError(f"preflights[{position}].css must be a non-empty string")
        layer = entry.get("layer", LAYER_PREFLIGHTS)
        if not isinstance(layer, str) or not layer.strip():
            raise ConfigError(f"preflights[{position}].layer must be a non-empty string")
        preflights.append(Preflight(get_css=_static_css(css), layer=layer))
    return preflights
