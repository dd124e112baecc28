"""Tests for the generation-tagged token cache."""

from __future__ import annotations

import pytest

from unogen.engine.cache import TokenCache, build_cache_key
from unogen.model import StringifiedUtil


def test_store_and_get() -> None:
    cache = TokenCache()
    key = build_cache_key("m-1")
    value = (StringifiedUtil(index=0, selector=".m-1", body="margin:0.25rem;"),)

    assert cache.store(key, value, generation=cache.generation)
    assert key in cache
    assert cache.get(key) is value
    assert len(cache) == 1


def test_misses_are_stored_as_none() -> None:
    cache = TokenCache()
    key = build_cache_key("nope", scope=".app")

    cache.store(key, None, generation=0)

    assert key == ("nope", None, ".app")
    assert key in cache
    assert cache.get(key) is None


def test_get_raises_on_unknown_key() -> None:
    with pytest.raises(KeyError):
        TokenCache().get(build_cache_key("m-1"))


def test_reset_bumps_generation_and_clears() -> None:
    cache = TokenCache()
    cache.store(build_cache_key("m-1"), None, generation=0)

    cache.reset()

    assert cache.generation == 1
    assert len(cache) == 0


def test_stale_generation_write_is_dropped() -> None:
    cache = TokenCache()
    started_at = cache.generation
    cache.reset()

    written = cache.store(build_cache_key("m-1"), None, generation=started_at)

    assert not written
    assert build_cache_key("m-1") not in cache
