"""Tests for UserConfig merging and resolution."""

from __future__ import annotations

import re
from typing import Any

import pytest

from unogen.config import (
    DynamicRule,
    StaticRule,
    UserConfig,
    VariantObject,
    merge_user_configs,
    resolve_config,
)
from unogen.constants.generator import DEFAULT_LAYERS
from unogen.exceptions import ConfigError
from unogen.model import RuleMeta
from unogen.utils import extract_split


def _handler(_match: re.Match[str], _context: Any) -> None:
    return None


def test_resolve_defaults() -> None:
    config = resolve_config()

    assert dict(config.layers) == DEFAULT_LAYERS
    assert config.extractors == (extract_split,)
    assert config.merge_selectors is True
    assert config.warn is True
    assert config.details is False
    assert config.shortcuts_layer == "shortcuts"


def test_rules_split_into_static_and_dynamic_with_indexes() -> None:
    config = resolve_config(
        UserConfig(
            rules=[
                ("m-1", {"margin": "0.25rem"}),
                (r"^w-(\d+)$", _handler),
                ("block", {"display": "block"}, RuleMeta(prefix="u-")),
            ]
        )
    )

    assert set(config.rules_static_map) == {"m-1", "u-block"}
    assert config.rules_dynamic[0].index == 1
    assert config.rules_dynamic[0].pattern.pattern == r"^w-(\d+)$"
    assert config.rules_size == 3
    assert [rule.index for rule in config.rules] == [0, 1, 2]
    assert isinstance(config.rules[0], StaticRule)
    assert isinstance(config.rules[1], DynamicRule)


def test_defaults_come_before_config() -> None:
    defaults = UserConfig(rules=[("a", {"color": "red"})], warn=False, theme={"colors": {"red": "#f00"}})
    config = UserConfig(rules=[("b", {"color": "blue"})], theme={"colors": {"blue": "#00f"}})

    resolved = resolve_config(config, defaults)

    assert resolved.rules_static_map["a"].index == 0
    assert resolved.rules_static_map["b"].index == 1
    assert resolved.warn is False
    assert resolved.theme["colors"] == {"red": "#f00", "blue": "#00f"}


def test_merge_user_configs_later_scalars_win() -> None:
    merged = merge_user_configs(
        UserConfig(merge_selectors=False, shortcuts={"a": "b"}),
        None,
        UserConfig(merge_selectors=True, shortcuts=[("c", "d")]),
    )

    assert merged.merge_selectors is True
    assert merged.shortcuts == [("a", "b"), ("c", "d")]


def test_first_static_shortcut_wins() -> None:
    config = resolve_config(UserConfig(shortcuts=[("btn", "m-1"), ("btn", "p-1")]))

    assert config.shortcuts_static_map["btn"].value == "m-1"


def test_variants_are_reindexed() -> None:
    def first(token: str, _context: Any) -> None:
        return None

    config = resolve_config(UserConfig(variants=[first, VariantObject(match=first, name="second", index=99)]))

    assert [variant.index for variant in config.variants] == [0, 1]
    assert config.variants[0].name == "first"
    assert config.variants[1].name == "second"


def test_safelist_is_deduplicated() -> None:
    assert resolve_config(UserConfig(safelist=["a", "b", "a"])).safelist == ("a", "b")


def test_user_layers_override_defaults() -> None:
    config = resolve_config(UserConfig(layers={"default": 5, "utilities": 1}))

    assert config.layers["default"] == 5
    assert config.layers["utilities"] == 1
    assert config.layers["preflights"] == -100


def test_resolved_mappings_are_read_only() -> None:
    config = resolve_config(UserConfig(rules=[("a", {"color": "red"})]))

    with pytest.raises(TypeError):
        config.rules_static_map["b"] = config.rules_static_map["a"]  # type: ignore[index]


@pytest.mark.parametrize(
    ("config", "expected_match"),
    [
        pytest.param(UserConfig(rules=[("only-key",)]), "rule #0", id="rule-arity"),
        pytest.param(UserConfig(rules=[(42, {"color": "red"})]), "must be a string", id="rule-key"),
        pytest.param(UserConfig(rules=[("a", 42)]), "body must be", id="rule-body"),
        pytest.param(UserConfig(rules=[("(", _handler)]), "invalid pattern", id="rule-pattern"),
        pytest.param(UserConfig(rules=[("a", {"color": "red"}, "meta")]), "RuleMeta", id="rule-meta"),
        pytest.param(UserConfig(shortcuts=[("a", 42)]), "shortcut #0", id="shortcut-value"),
        pytest.param(UserConfig(variants=["hover"]), "variant #0", id="variant-not-callable"),
        pytest.param(UserConfig(blocklist=[42]), "blocklist", id="blocklist-type"),
        pytest.param(UserConfig(layers={"a": "1"}), "layers.a", id="layer-order"),
        pytest.param(UserConfig(safelist=[1]), "safelist", id="safelist-type"),
        pytest.param(UserConfig(postprocess=["x"]), "postprocess", id="postprocess-type"),
    ],
)
def test_invalid_config_raises(config: UserConfig, expected_match: str) -> None:
    with pytest.raises(ConfigError, match=expected_match):
        resolve_config(config)


def test_config_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        resolve_config(UserConfig(variants=[None]))
