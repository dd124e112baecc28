"""Tests for rule matching and handler result classification."""

from __future__ import annotations

import re
from typing import Any

import pytest

from unogen import UnoGenerator, UserConfig, create_generator
from unogen.engine.context import RuleContext
from unogen.engine.results import ResultKind, classify_result, normalize_rule_result
from unogen.engine.rules import is_blocked, parse_util
from unogen.model import ParsedUtil, RawUtil, RuleMeta, VariantMatch


def _context(generator: UnoGenerator, token: str) -> RuleContext:
    return RuleContext(
        raw_selector=token,
        current_selector=token,
        generator=generator,
        theme=generator.config.theme,
        variant_match=VariantMatch(raw=token, current=token),
    )


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        pytest.param(None, ResultKind.NONE, id="none"),
        pytest.param("", ResultKind.NONE, id="empty-string"),
        pytest.param({}, ResultKind.NONE, id="empty-mapping"),
        pytest.param([], ResultKind.NONE, id="empty-list"),
        pytest.param(42, ResultKind.NONE, id="number"),
        pytest.param(".x{color:red;}", ResultKind.RAW, id="raw"),
        pytest.param({"color": "red"}, ResultKind.ENTRIES, id="mapping"),
        pytest.param([("color", "red"), ("margin", 0)], ResultKind.ENTRIES, id="entry-list"),
        pytest.param([{"color": "red"}, "@media print{}"], ResultKind.GROUPS, id="groups"),
    ],
)
def test_classify_result(value: Any, expected: ResultKind) -> None:
    assert classify_result(value) is expected


def test_normalize_rule_result_drops_malformed_groups() -> None:
    assert normalize_rule_result([{"color": "red"}, 42, {}]) == [[("color", "red")]]


def test_normalize_rule_result_drops_none_values() -> None:
    assert normalize_rule_result({"color": "red", "margin": None}) == [[("color", "red")]]


def test_is_blocked_matches_strings_and_patterns() -> None:
    blocklist = ["exact", re.compile(r"^bad-")]

    assert is_blocked(blocklist, "exact")
    assert is_blocked(blocklist, "bad-1")
    assert not is_blocked(blocklist, "exactly")


@pytest.mark.asyncio
async def test_static_rule_wins_over_dynamic() -> None:
    generator = create_generator(
        UserConfig(rules=[(r"^m-(\d)$", lambda match, _context: {"margin": "9px"}), ("m-1", {"margin": "1px"})])
    )

    utils = await parse_util(generator, "m-1", _context(generator, "m-1"))

    assert utils == [ParsedUtil(index=1, raw="m-1", entries=[("margin", "1px")])]


@pytest.mark.asyncio
async def test_empty_result_continues_to_later_rules() -> None:
    generator = create_generator(
        UserConfig(
            rules=[
                (r"^x-(\d)$", lambda match, _context: {}),
                (r"^x-(\d)$", lambda match, _context: 42),
                (r"^x-(\d)$", lambda match, _context: {"z-index": match.group(1)}),
            ]
        )
    )

    utils = await parse_util(generator, "x-3", _context(generator, "x-3"))

    assert utils is not None
    assert utils[0].index == 2
    assert isinstance(utils[0], ParsedUtil)
    assert utils[0].entries == [("z-index", "3")]


@pytest.mark.asyncio
async def test_first_usable_dynamic_rule_wins() -> None:
    generator = create_generator(
        UserConfig(
            rules=[
                (r"^x-(\d)$", lambda match, _context: {"order": 1}),
                (r"^x-(\d)$", lambda match, _context: {"order": 2}),
            ]
        )
    )

    utils = await parse_util(generator, "x-1", _context(generator, "x-1"))

    assert utils is not None and utils[0].index == 0


@pytest.mark.asyncio
async def test_raw_and_group_results() -> None:
    def font_face(_match: re.Match[str], _context: Any) -> list[Any]:
        return ["@font-face{font-family:Inter;}", {"font-family": "Inter"}]

    generator = create_generator(UserConfig(rules=[(r"^font-inter$", font_face)]))

    utils = await parse_util(generator, "font-inter", _context(generator, "font-inter"))

    assert utils is not None
    assert utils[0] == RawUtil(index=0, css="@font-face{font-family:Inter;}")
    assert isinstance(utils[1], ParsedUtil)
    result = await generator.generate(["font-inter"], minify=True, preflights=False)
    assert result.css == "@font-face{font-family:Inter;}.font-inter{font-family:Inter;}"


@pytest.mark.asyncio
async def test_rule_prefix_is_required_and_stripped() -> None:
    seen: list[str] = []

    def margin(match: re.Match[str], _context: Any) -> dict[str, str]:
        seen.append(match.string)
        return {"margin": f"{match.group(1)}px"}

    prefix = RuleMeta(prefix="u-")
    generator = create_generator(
        UserConfig(rules=[(r"^m-(\d)$", margin, prefix), ("block", {"display": "block"}, prefix)])
    )

    assert await parse_util(generator, "m-1", _context(generator, "m-1")) is None
    assert await parse_util(generator, "u-m-1", _context(generator, "u-m-1")) is not None
    assert await parse_util(generator, "u-block", _context(generator, "u-block")) is not None
    assert seen == ["m-1"]


@pytest.mark.asyncio
async def test_rule_handler_can_construct_css() -> None:
    def custom(_match: re.Match[str], context: RuleContext) -> str:
        return context.construct_css({"color": "red"})

    generator = create_generator(UserConfig(rules=[(r"^custom$", custom)]))

    result = await generator.generate(["custom"], minify=True, preflights=False)

    assert result.css == ".custom{color:red;}"


@pytest.mark.asyncio
async def test_unknown_token_returns_none(generator: UnoGenerator) -> None:
    assert await parse_util(generator, "nothing", _context(generator, "nothing")) is None
