"""Tests for the variant handler chain."""

from __future__ import annotations

from unogen import UnoGenerator
from unogen.engine.composer import compose, stringify_util
from unogen.engine.context import RuleContext
from unogen.model import (
    ParsedUtil,
    RawUtil,
    RuleMeta,
    VariantHandler,
    VariantHandlerContext,
    VariantMatch,
)


def _seed() -> VariantHandlerContext:
    return VariantHandlerContext(selector=".t", entries=[("color", "red")])


def _suffix(text: str, order: int | None = None) -> VariantHandler:
    return VariantHandler(matcher="t", order=order, selector=lambda selector, _entries: f"{selector}{text}")


def test_handlers_run_in_ascending_order() -> None:
    result = compose([_suffix(":a", order=2), _suffix(":b", order=1)], _seed())

    assert result.selector == ".t:b:a"


def test_equal_orders_keep_collected_order() -> None:
    result = compose([_suffix(":first"), _suffix(":second"), _suffix(":third")], _seed())

    assert result.selector == ".t:first:second:third"


def test_handle_stages_wrap_innermost_first() -> None:
    received: list[str] = []

    def wrapper(name: str) -> VariantHandler:
        def handle(seen: VariantHandlerContext, produced: VariantHandlerContext) -> VariantHandlerContext:
            received.append(seen.selector)
            return produced.evolve(selector=f"{name}({produced.selector})")

        return VariantHandler(matcher="t", selector=lambda selector, _entries: f"{selector}.{name}", handle=handle)

    result = compose([wrapper("a"), wrapper("b")], _seed())

    assert result.selector == "a(b(.t.a.b))"
    assert received == [".t.a.b", ".t.a"]


def test_outer_forward_rewrites_reach_inner_handlers() -> None:
    outer = VariantHandler(
        matcher="t",
        order=1,
        body=lambda entries: [(key, f"{value} !important") for key, value in entries],
        handle=lambda _seen, produced: produced.evolve(prefix=".wrap "),
    )
    inner = VariantHandler(
        matcher="t",
        order=2,
        selector=lambda selector, entries: f"{selector}[data-v='{entries[0][1]}']",
    )

    result = compose([inner, outer], _seed())

    assert result.selector == ".t[data-v='red !important']"
    assert result.prefix == ".wrap "
    assert result.entries == [("color", "red !important")]


def test_body_parent_and_overrides() -> None:
    handler = VariantHandler(
        matcher="t",
        body=lambda entries: [(key, f"{value} !important") for key, value in entries],
        parent=("@media print", 5),
        layer="print",
        sort=2,
        no_merge=True,
    )

    result = compose([handler], _seed())

    assert result.entries == [("color", "red !important")]
    assert result.parent == "@media print"
    assert result.parent_order == 5
    assert (result.layer, result.sort, result.no_merge) == ("print", 2, True)


def test_body_rewrite_returning_none_keeps_entries() -> None:
    result = compose([VariantHandler(matcher="t", body=lambda entries: None)], _seed())

    assert result.entries == [("color", "red")]


def test_stringify_util_prefers_variant_layer(generator: UnoGenerator) -> None:
    handler = VariantHandler(matcher="m-1", layer="overlay")
    parsed = ParsedUtil(
        index=3,
        raw="x:m-1",
        entries=[("margin", 1.0), ("$$internal", "yes"), ("margin", 1.0)],
        meta=RuleMeta(layer="base", sort=4),
        variant_handlers=(handler,),
    )
    context = RuleContext(
        raw_selector="x:m-1",
        current_selector="m-1",
        generator=generator,
        theme=generator.config.theme,
        variant_match=VariantMatch(raw="x:m-1", current="m-1", handlers=(handler,)),
    )

    util = stringify_util(generator, parsed, context)

    assert util is not None
    assert util.selector == ".x\\:m-1"
    assert util.body == "margin:1;"
    assert util.layer == "overlay"
    assert util.sort == 4
    assert util.context is None


def test_stringify_util_handles_raw_and_empty(generator: UnoGenerator) -> None:
    context = RuleContext(
        raw_selector="x",
        current_selector="x",
        generator=generator,
        theme=generator.config.theme,
        variant_match=VariantMatch(raw="x", current="x"),
    )

    raw = stringify_util(generator, RawUtil(index=0, css="@import url(a.css);"), context)
    empty = stringify_util(generator, ParsedUtil(index=0, raw="x", entries=[("$$only", "control")]), context)

    assert raw is not None and raw.selector is None and raw.body == "@import url(a.css);"
    assert empty is None
    assert stringify_util(generator, None, context) is None
