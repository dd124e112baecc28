"""Tests for merging, sorting and rendering layers."""

from __future__ import annotations

from unogen import resolve_config
from unogen.config import UserConfig
from unogen.engine.layers import GenerateResult, apply_scope, render_layers, sort_layer_names
from unogen.model import RuleMeta, StringifiedUtil


def _util(selector: str | None, body: str, index: int = 0, **kwargs: object) -> StringifiedUtil:
    return StringifiedUtil(index=index, selector=selector, body=body, **kwargs)  # type: ignore[arg-type]


def test_sort_layer_names_by_order_then_name() -> None:
    config = resolve_config(UserConfig(layers={"zeta": 0, "alpha": 0, "top": -300}))

    assert sort_layer_names(["default", "zeta", "alpha", "top", "preflights"], config) == [
        "top",
        "preflights",
        "alpha",
        "default",
        "zeta",
    ]


def test_merge_keeps_first_occurrence_and_selector_order() -> None:
    config = resolve_config()
    utils = [
        _util(".c", "color:red;", index=2),
        _util(".m", "margin:0;", index=1),
        _util(".a", "color:red;", index=0),
        _util(".a", "color:red;", index=0),
    ]

    names, rendered = render_layers(utils, config, minify=True)

    assert names == ["default"]
    assert rendered["default"] == ".a,.c{color:red;}.m{margin:0;}"


def test_sort_ties_break_on_sort_then_selector() -> None:
    config = resolve_config(UserConfig(merge_selectors=False))
    utils = [
        _util(".z", "color:red;", meta=RuleMeta(sort=1)),
        _util(".y", "color:red;"),
        _util(".x", "color:blue;"),
    ]

    _, rendered = render_layers(utils, config, minify=True)

    assert rendered["default"] == ".x{color:blue;}.y{color:red;}.z{color:red;}"


def test_nested_parents_render_as_nested_blocks() -> None:
    config = resolve_config()
    utils = [_util(".p", "color:red;", parent="@media print $$ @supports (display: grid)")]

    _, minified = render_layers(utils, config, minify=True)
    _, pretty = render_layers(utils, config)

    assert minified["default"] == "@media print{@supports (display: grid){.p{color:red;}}}"
    assert pretty["default"] == (
        "/* layer: default */\n@media print{\n@supports (display: grid){\n.p{color:red;}\n}\n}"
    )


def test_parents_follow_recorded_order() -> None:
    config = resolve_config()
    utils = [
        _util(".b", "color:red;", parent="@media b"),
        _util(".a", "color:red;", parent="@media a"),
        _util(".root", "color:red;"),
    ]

    _, rendered = render_layers(utils, config, parent_orders={"@media a": 2, "@media b": 1}, minify=True)

    assert rendered["default"] == ".root{color:red;}@media b{.b{color:red;}}@media a{.a{color:red;}}"


def test_apply_scope_uses_placeholder() -> None:
    assert apply_scope(".dark $$ .x", ".app") == ".dark .app .x"
    assert apply_scope(".dark $$ .x", None) == ".dark .x"
    assert apply_scope(".x", ".app") == ".app .x"
    assert apply_scope(".x", None) == ".x"


def test_empty_preflight_layers_are_skipped() -> None:
    config = resolve_config()

    names, rendered = render_layers([], config, preflights={"preflights": [""], "imports": ["@import 'a';"]})

    assert names == ["imports"]
    assert rendered == {"imports": "/* layer: imports */\n@import 'a';"}


def test_generate_result_layer_access() -> None:
    result = GenerateResult(layers=("a", "b"), layer_css={"a": "A", "b": "B"})

    assert result.css == "A\nB"
    assert result.get_layer("b") == "B"
    assert result.get_layer("c") is None
    assert result.get_layers(includes=["b"]) == "B"
