"""Resolution and generation engine."""

from __future__ import annotations

from unogen.engine.generator import UnoGenerator, create_generator
from unogen.engine.layers import GenerateResult

__all__ = [
    "GenerateResult",
    "UnoGenerator",
    "create_generator",
]
