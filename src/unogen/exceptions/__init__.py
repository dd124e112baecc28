"""Shared exception hierarchy for unogen."""

from __future__ import annotations

from .base import UnoError
from .config import ConfigError
from .generation import GenerationError, ShortcutCycleError, TokenResolutionError

__all__ = [
    "ConfigError",
    "GenerationError",
    "ShortcutCycleError",
    "TokenResolutionError",
    "UnoError",
]
