"""Shared pytest fixtures: a small config covering rules, variants and shortcuts."""

from __future__ import annotations

import re
from typing import Any

import pytest

from unogen import UnoGenerator, UserConfig, create_generator
from unogen.model import VariantHandler


def _width(match: re.Match[str], _context: Any) -> dict[str, str]:
    return {"width": f"{int(match.group(1)) * 0.25:g}rem"}


def _hover(token: str, _context: Any) -> VariantHandler | None:
    if not token.startswith("hover:"):
        return None
    return VariantHandler(matcher=token[len("hover:") :], selector=lambda selector, _entries: f"{selector}:hover")


def _breakpoint(token: str, _context: Any) -> VariantHandler | None:
    sizes = {"sm": ("640px", 0), "md": ("768px", 1)}
    name, separator, rest = token.partition(":")
    if not separator or name not in sizes:
        return None
    size, order = sizes[name]
    return VariantHandler(matcher=rest, parent=(f"@media (min-width: {size})", order))


@pytest.fixture
def hover_variant() -> Any:
    """Return a matcher that appends ``:hover`` to the selector."""
    return _hover


@pytest.fixture
def scenario_config() -> UserConfig:
    """Return the config used by the end-to-end scenarios."""
    return UserConfig(
        rules=[
            ("m-1", {"margin": "0.25rem"}),
            ("p-1", {"padding": "0.25rem"}),
            (r"^w-(\d+)$", _width),
            ("text-red", {"color": "red"}),
            ("a", {"color": "red"}),
            ("b", {"color": "red"}),
        ],
        shortcuts=[("btn", "m-1 p-1")],
        variants=[_hover, _breakpoint],
    )


@pytest.fixture
def generator(scenario_config: UserConfig) -> UnoGenerator:
    """Return a generator built from the scenario config."""
    return create_generator(scenario_config)
