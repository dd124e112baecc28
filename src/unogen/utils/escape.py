"""CSS selector escaping."""

from __future__ import annotations

import re

_ATTRIBUTE_TOKEN = re.compile(r'^\[(.+?)(~?=)"(.*)"\]$')


def escape_selector(value: str) -> str:
    """Escape *value* for use as a CSS identifier (CSS.escape semantics).

    Commas become ``\\2c `` so that merged selector lists stay unambiguous.
    """
    result: list[str] = []
    length = len(value)
    first = value[0] if value else ""
    for index, char in enumerate(value):
        code = ord(char)
        if code == 0:
            result.append("\ufffd")
        elif char == ",":
            result.append("\\2c ")
        elif (
            0x01 <= code <= 0x1F
            or code == 0x7F
            or (index == 0 and char.isascii() and char.isdigit())
            or (index == 1 and char.isascii() and char.isdigit() and first == "-")
        ):
            result.append(f"\\{code:x} ")
        elif index == 0 and length == 1 and char == "-":
            result.append(f"\\{char}")
        elif code >= 0x80 or char in "-_" or (char.isascii() and char.isalnum()):
            result.append(char)
        else:
            result.append(f"\\{char}")
    return "".join(result)


def to_escaped_selector(raw: str) -> str:
    """Seed selector for a raw token: a class, or an attribute selector."""
    match = _ATTRIBUTE_TOKEN.match(raw)
    if match is not None:
        name, operator, value = match.groups()
        return f'[{name}{operator}"{escape_selector(value)}"]'
    return f".{escape_selector(raw)}"
