"""unogen: on-demand atomic CSS generation."""

from __future__ import annotations

from unogen.config import ResolvedConfig, UserConfig, resolve_config
from unogen.engine import GenerateResult, UnoGenerator, create_generator

__version__ = "0.4.0"

__all__ = [
    "GenerateResult",
    "ResolvedConfig",
    "UnoGenerator",
    "UserConfig",
    "__version__",
    "create_generator",
    "resolve_config",
]
