"""Variant group expansion: ``hover:(a b)`` becomes ``hover:a hover:b``."""

from __future__ import annotations

import re

from unogen.constants.generator import VARIANT_GROUP_MAX_DEPTH

_CLASS_GROUP = re.compile(
    r"((?:[!@\w+:_/-]|\[&?>?:?.*\])+?)([:-])\(((?:[~!\w\s:/\\,%#.$?-]|\[.*?\])+?)\)(?!\s*?=>)",
    re.MULTILINE,
)
_IMPORTANT = re.compile(r"^(!?)(.*)$", re.DOTALL)


def expand_variant_group(
    text: str,
    separators: tuple[str, ...] = ("-", ":"),
    depth: int = VARIANT_GROUP_MAX_DEPTH,
) -> str:
    """Expand grouped utilities until stable or *depth* rounds are spent."""

    def replace(match: re.Match[str]) -> str:
        prefix, separator, body = match.groups()
        if separator not in separators:
            return match.group(0)
        expanded = []
        for item in body.split():
            if item == "~":
                expanded.append(prefix)
            else:
                important, rest = _IMPORTANT.match(item).groups()  # type: ignore[union-attr]
                expanded.append(f"{important}{prefix}{separator}{rest}")
        return " ".join(expanded)

    content = text
    while depth > 0:
        before = content
        content = _CLASS_GROUP.sub(replace, content)
        depth -= 1
        if content == before:
            break
    return content
