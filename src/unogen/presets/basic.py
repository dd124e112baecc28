"""The ``basic`` preset: a small utility-first rule set with common variants."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from unogen.config.model import Preflight, UserConfig, VariantObject
from unogen.constants.generator import CONTROL_KEY_PREFIX, SCOPE_PLACEHOLDER
from unogen.model import VariantHandler, VariantHandlerContext
from unogen.types import CSSEntries, CSSValues
from unogen.utils import format_css_value

THEME: dict[str, Any] = {
    "colors": {
        "inherit": "inherit",
        "current": "currentColor",
        "transparent": "transparent",
        "black": "#000000",
        "white": "#ffffff",
        "gray": {"100": "#f3f4f6", "300": "#d1d5db", "500": "#6b7280", "700": "#374151", "900": "#111827"},
        "red": {"DEFAULT": "#ef4444", "100": "#fee2e2", "500": "#ef4444", "700": "#b91c1c"},
        "green": {"DEFAULT": "#22c55e", "100": "#dcfce7", "500": "#22c55e", "700": "#15803d"},
        "blue": {"DEFAULT": "#3b82f6", "100": "#dbeafe", "500": "#3b82f6", "700": "#1d4ed8"},
        "yellow": {"DEFAULT": "#eab308", "100": "#fef9c3", "500": "#eab308", "700": "#a16207"},
    },
    "font_size": {
        "xs": ("0.75rem", "1rem"),
        "sm": ("0.875rem", "1.25rem"),
        "base": ("1rem", "1.5rem"),
        "lg": ("1.125rem", "1.75rem"),
        "xl": ("1.25rem", "1.75rem"),
        "2xl": ("1.5rem", "2rem"),
        "3xl": ("1.875rem", "2.25rem"),
    },
    "font_weight": {
        "thin": "100",
        "light": "300",
        "normal": "400",
        "medium": "500",
        "semibold": "600",
        "bold": "700",
        "black": "900",
    },
    "border_radius": {
        "DEFAULT": "0.25rem",
        "none": "0",
        "sm": "0.125rem",
        "md": "0.375rem",
        "lg": "0.5rem",
        "xl": "0.75rem",
        "full": "9999px",
    },
    "breakpoints": {"sm": "640px", "md": "768px", "lg": "1024px", "xl": "1280px", "2xl": "1536px"},
}

_DISPLAY = ("block", "inline-block", "inline", "flex", "inline-flex", "grid", "contents")
_POSITION = ("static", "fixed", "absolute", "relative", "sticky")
_DIRECTIONS: dict[str, tuple[str, ...]] = {
    "": ("",),
    "t": ("-top",),
    "r": ("-right",),
    "b": ("-bottom",),
    "l": ("-left",),
    "x": ("-left", "-right"),
    "y": ("-top", "-bottom"),
}
_COLOR_PROPERTIES = {"text": "color", "bg": "background-color", "border": "border-color"}
_PSEUDO_CLASSES = {
    "hover": "hover",
    "focus": "focus",
    "focus-visible": "focus-visible",
    "focus-within": "focus-within",
    "active": "active",
    "visited": "visited",
    "disabled": "disabled",
    "checked": "checked",
    "first": "first-child",
    "last": "last-child",
    "odd": "nth-child(odd)",
    "even": "nth-child(even)",
}
_PSEUDO_ELEMENTS = ("before", "after", "placeholder", "selection", "marker")
_HEX_COLOR = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def _rem(quarters: float) -> str:
    if quarters == 0:
        return "0"
    return f"{quarters / 4:g}rem"


def _spacing(match: re.Match[str], _context: Any) -> CSSEntries | None:
    negative, kind, direction, size = match.groups()
    prop = "margin" if kind == "m" else "padding"
    if size == "auto":
        if prop == "padding" or negative:
            return None
        value = "auto"
    elif size == "px":
        value = "1px"
    else:
        value = _rem(float(size))
    if negative and value != "0":
        value = f"-{value}"
    return [(f"{prop}{suffix}", value) for suffix in _DIRECTIONS[direction or ""]]


def _sizing(match: re.Match[str], _context: Any) -> CSSEntries | None:
    kind, size = match.groups()
    prop = "width" if kind == "w" else "height"
    if size == "full":
        value = "100%"
    elif size == "screen":
        value = "100vw" if kind == "w" else "100vh"
    elif size in ("auto", "px"):
        value = "1px" if size == "px" else size
    elif "/" in size:
        numerator, denominator = size.split("/")
        if int(denominator) == 0:
            return None
        value = f"{int(numerator) / int(denominator) * 100:g}%"
    else:
        value = _rem(float(size))
    return [(prop, value)]


def parse_color(body: str, theme: Mapping[str, Any]) -> str | None:
    """Resolve ``red-500`` or ``red-500/50`` against the theme colours."""
    name, _, opacity = body.partition("/")
    colors = theme.get("colors", {})
    color: Any = colors.get(name)
    if color is None and "-" in name:
        family, _, shade = name.rpartition("-")
        palette = colors.get(family)
        if isinstance(palette, Mapping):
            color = palette.get(shade)
    if isinstance(color, Mapping):
        color = color.get("DEFAULT")
    if not isinstance(color, str):
        return None
    if not opacity:
        return color
    if not opacity.isdigit():
        return None
    hex_match = _HEX_COLOR.match(color)
    if hex_match is None:
        return None
    digits = hex_match.group(1)
    if len(digits) == 3:
        digits = "".join(char * 2 for char in digits)
    red, green, blue = (int(digits[offset : offset + 2], 16) for offset in (0, 2, 4))
    return f"rgb({red} {green} {blue} / {int(opacity) / 100:g})"


def _color(match: re.Match[str], context: Any) -> CSSEntries | None:
    kind, body = match.groups()
    color = parse_color(body, context.theme)
    if color is None:
        return None
    return [(_COLOR_PROPERTIES[kind], color)]


def _font_size(match: re.Match[str], context: Any) -> CSSEntries | None:
    size = context.theme.get("font_size", {}).get(match.group(1))
    if size is None:
        return None
    font_size, line_height = size
    return [("font-size", font_size), ("line-height", line_height)]


def _font_weight(match: re.Match[str], context: Any) -> CSSEntries | None:
    weight = context.theme.get("font_weight", {}).get(match.group(1))
    if weight is None:
        return None
    return [("font-weight", weight)]


def _rounded(match: re.Match[str], context: Any) -> CSSEntries | None:
    radius = context.theme.get("border_radius", {}).get(match.group(1) or "DEFAULT")
    if radius is None:
        return None
    return [("border-radius", radius)]


def _border_width(match: re.Match[str], _context: Any) -> CSSEntries:
    return [("border-width", f"{match.group(1) or 1}px")]


def _z_index(match: re.Match[str], _context: Any) -> CSSEntries:
    return [("z-index", match.group(1))]


def _opacity(match: re.Match[str], _context: Any) -> CSSEntries:
    return [("opacity", f"{int(match.group(1)) / 100:g}")]


def _arbitrary_property(match: re.Match[str], _context: Any) -> CSSEntries:
    prop, value = match.groups()
    return [(prop, value.replace("_", " "))]


def _container(_match: re.Match[str], context: Any) -> CSSValues:
    """Full width plus one ``max-width`` step per breakpoint, in ascending order."""
    steps = "".join(
        f"@media (min-width: {size}){{{context.construct_css({'max-width': size})}}}"
        for size in context.theme.get("breakpoints", {}).values()
    )
    return [{"width": "100%"}, steps]


def _important(token: str, _context: Any) -> VariantHandler | None:
    if token.startswith("!"):
        rest = token[1:]
    elif token.endswith("!"):
        rest = token[:-1]
    else:
        return None
    if not rest:
        return None

    def body(entries: CSSEntries) -> CSSEntries:
        return [
            (key, value if key.startswith(CONTROL_KEY_PREFIX) else f"{format_css_value(value)} !important")
            for key, value in entries
        ]

    return VariantHandler(matcher=rest, body=body)


def _pseudo_class(token: str, _context: Any) -> VariantHandler | None:
    name, separator, rest = token.partition(":")
    pseudo = _PSEUDO_CLASSES.get(name)
    if not separator or pseudo is None or not rest:
        return None
    return VariantHandler(matcher=rest, selector=lambda selector, _entries: f"{selector}:{pseudo}")


def _pseudo_element(token: str, _context: Any) -> VariantHandler | None:
    name, separator, rest = token.partition(":")
    if not separator or name not in _PSEUDO_ELEMENTS or not rest:
        return None
    return VariantHandler(matcher=rest, selector=lambda selector, _entries: f"{selector}::{name}", sort=1)


def _group_pseudo(token: str, _context: Any) -> VariantHandler | None:
    if not token.startswith("group-"):
        return None
    name, separator, rest = token[len("group-") :].partition(":")
    pseudo = _PSEUDO_CLASSES.get(name)
    if not separator or pseudo is None or not rest:
        return None

    def handle(_received: VariantHandlerContext, produced: VariantHandlerContext) -> VariantHandlerContext:
        return produced.evolve(prefix=f".group:{pseudo} {produced.prefix}")

    return VariantHandler(matcher=rest, handle=handle)


def _dark(token: str, _context: Any) -> VariantHandler | None:
    if not token.startswith("dark:") or len(token) == len("dark:"):
        return None
    return VariantHandler(
        matcher=token[len("dark:") :],
        selector=lambda selector, _entries: f".dark{SCOPE_PLACEHOLDER}{selector}",
    )


def _breakpoint(token: str, context: Any) -> VariantHandler | None:
    name, separator, rest = token.partition(":")
    if not separator or not rest:
        return None
    breakpoints = list(context.theme.get("breakpoints", {}).items())
    below = name.startswith("lt-")
    key = name[len("lt-") :] if below else name
    for position, (point, size) in enumerate(breakpoints):
        if point != key:
            continue
        if below:
            return VariantHandler(matcher=rest, parent=(f"@media (max-width: calc({size} - 0.1px))", 100 + position))
        return VariantHandler(matcher=rest, parent=(f"@media (min-width: {size})", 1000 + position))
    return None


def _layer(token: str, _context: Any) -> VariantHandler | None:
    if not token.startswith("layer-"):
        return None
    name, separator, rest = token[len("layer-") :].partition(":")
    if not separator or not name or not rest:
        return None
    return VariantHandler(matcher=rest, layer=name)


def _box_sizing(_context: Any) -> str:
    return "*,::before,::after{box-sizing:border-box;border-width:0;border-style:solid;}"


def preset_basic() -> UserConfig:
    """Return a fresh UserConfig holding the basic rules, variants and theme."""
    rules: list[tuple[Any, ...]] = []
    rules.extend((name, {"display": name}) for name in _DISPLAY)
    rules.append(("hidden", {"display": "none"}))
    rules.extend((name, {"position": name}) for name in _POSITION)
    rules.extend(
        [
            ("italic", {"font-style": "italic"}),
            ("not-italic", {"font-style": "normal"}),
            ("underline", {"text-decoration-line": "underline"}),
            ("line-through", {"text-decoration-line": "line-through"}),
            ("no-underline", {"text-decoration-line": "none"}),
            ("uppercase", {"text-transform": "uppercase"}),
            ("lowercase", {"text-transform": "lowercase"}),
            ("capitalize", {"text-transform": "capitalize"}),
            ("truncate", {"overflow": "hidden", "text-overflow": "ellipsis", "white-space": "nowrap"}),
            ("flex-row", {"flex-direction": "row"}),
            ("flex-col", {"flex-direction": "column"}),
            ("items-center", {"align-items": "center"}),
            ("justify-center", {"justify-content": "center"}),
            ("justify-between", {"justify-content": "space-between"}),
            (r"^(-?)([mp])([trblxy])?-(\d+(?:\.\d+)?|px|auto)$", _spacing),
            (r"^([wh])-(\d+(?:\.\d+)?|\d+/\d+|full|screen|auto|px)$", _sizing),
            (r"^(text|bg|border)-(.+)$", _color),
            (r"^text-([\w]+)$", _font_size),
            (r"^font-(\w+)$", _font_weight),
            (r"^rounded(?:-(\w+))?$", _rounded),
            (r"^border(?:-(\d+))?$", _border_width),
            (r"^z-(-?\d+|auto)$", _z_index),
            (r"^op(?:acity)?-(\d+)$", _opacity),
            (r"^\[([a-z-]+):([^\]]+)\]$", _arbitrary_property),
            (r"^container$", _container),
        ]
    )

    return UserConfig(
        rules=rules,
        variants=[
            VariantObject(match=_important, name="important"),
            VariantObject(match=_group_pseudo, name="group-pseudo"),
            VariantObject(match=_pseudo_class, name="pseudo-class"),
            VariantObject(match=_pseudo_element, name="pseudo-element"),
            VariantObject(match=_dark, name="dark"),
            VariantObject(match=_breakpoint, name="breakpoints"),
            VariantObject(match=_layer, name="layer"),
        ],
        theme={key: dict(value) for key, value in THEME.items()},
        preflights=[Preflight(get_css=_box_sizing)],
    )
