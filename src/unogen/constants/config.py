"""Configuration defaults, filenames and allowed YAML keys."""

from __future__ import annotations

CONFIG_FILENAME: str = "unogen.yaml"

PRESET_BASIC: str = "basic"
PRESET_NONE: str = "none"
VALID_PRESETS: frozenset[str] = frozenset({PRESET_BASIC, PRESET_NONE})
DEFAULT_PRESET: str = PRESET_BASIC

ALLOWED_CONFIG_KEYS: frozenset[str] = frozenset(
    {
        "preset",
        "merge_selectors",
        "warn",
        "details",
        "shortcuts_layer",
        "layers",
        "rules",
        "shortcuts",
        "blocklist",
        "safelist",
        "preflights",
    }
)

ALLOWED_PREFLIGHT_KEYS: frozenset[str] = frozenset({"css", "layer"})
BOOLEAN_CONFIG_KEYS: tuple[str, ...] = ("merge_selectors", "warn", "details")
