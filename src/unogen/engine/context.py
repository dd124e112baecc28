"""Contexts handed to rule, variant and preflight callables."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from unogen.model import VariantHandler, VariantMatch
from unogen.types import CSSEntries, CSSObject

if TYPE_CHECKING:
    from unogen.config.model import Rule, Shortcut, VariantObject
    from unogen.engine.generator import UnoGenerator


@dataclass(frozen=True)
class VariantContext:
    """Read-only context for variant matchers."""

    raw_selector: str
    generator: UnoGenerator
    theme: Mapping[str, Any]


@dataclass(frozen=True)
class PreflightContext:
    """Read-only context for preflight CSS producers."""

    generator: UnoGenerator
    theme: Mapping[str, Any]


@dataclass
class RuleContext:
    """Per-token context for rule and shortcut handlers.

    ``rules``, ``shortcuts`` and ``variants`` record provenance and are only
    populated when the config enables ``details``.
    """

    raw_selector: str
    current_selector: str
    generator: UnoGenerator
    theme: Mapping[str, Any]
    variant_match: VariantMatch
    variant_handlers: tuple[VariantHandler, ...] = ()
    rules: list[Rule] | None = None
    shortcuts: list[Shortcut] | None = None
    variants: list[VariantObject] | None = None

    def construct_css(self, body: CSSEntries | CSSObject | str, override_selector: str | None = None) -> str:
        """Render *body* as a complete rule under the current variant chain."""
        from unogen.engine.composer import construct_css

        return construct_css(self, body, override_selector)

    def record_rule(self, rule: Rule) -> None:
        if self.rules is not None:
            self.rules.append(rule)

    def record_shortcut(self, shortcut: Shortcut) -> None:
        if self.shortcuts is not None:
            self.shortcuts.append(shortcut)
