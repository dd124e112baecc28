"""Configuration model, resolution and YAML loading for unogen.

This package facade re-exports the public names so that callers can use
``from unogen.config import ...``.
"""

from __future__ import annotations

from unogen.config.model import (
    DynamicRule,
    DynamicShortcut,
    Preflight,
    ResolvedConfig,
    StaticRule,
    StaticShortcut,
    UserConfig,
    VariantObject,
)
from unogen.config.resolver import merge_user_configs, resolve_config
from unogen.config.loader import load_config, parse_config

__all__ = [
    "DynamicRule",
    "DynamicShortcut",
    "Preflight",
    "ResolvedConfig",
    "StaticRule",
    "StaticShortcut",
    "UserConfig",
    "VariantObject",
    "load_config",
    "merge_user_configs",
    "parse_config",
    "resolve_config",
]
