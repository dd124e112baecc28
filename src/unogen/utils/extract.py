"""Default token extractor: split source text on delimiters."""

from __future__ import annotations

from unogen.constants.generator import SPLIT_PATTERN, VALID_SELECTOR_PATTERN


def is_valid_selector(candidate: str) -> bool:
    """Return True when *candidate* contains at least one selector character."""
    return VALID_SELECTOR_PATTERN.search(candidate) is not None


def extract_split(code: str) -> list[str]:
    """Split *code* on whitespace, quotes, backticks, ``;`` and braces."""
    return [fragment for fragment in SPLIT_PATTERN.split(code) if fragment and is_valid_selector(fragment)]
