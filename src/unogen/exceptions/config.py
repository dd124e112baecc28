"""Configuration-related exceptions."""

from __future__ import annotations

from unogen.exceptions.base import UnoError


class ConfigError(UnoError, ValueError):
    """Raised when a user config cannot be resolved into a ResolvedConfig."""
