"""Pure helpers shared by the engine and presets."""

from .awaitable import maybe_await
from .entries import clear_identical_entries, entries_to_css, format_css_value, normalize_css_entries
from .escape import escape_selector, to_escaped_selector
from .extract import extract_split, is_valid_selector
from .variant_group import expand_variant_group

__all__ = [
    "clear_identical_entries",
    "entries_to_css",
    "escape_selector",
    "expand_variant_group",
    "extract_split",
    "format_css_value",
    "is_valid_selector",
    "maybe_await",
    "normalize_css_entries",
    "to_escaped_selector",
]
