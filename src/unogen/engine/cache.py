"""Per-token memoization of resolved utilities, tagged by config generation."""

from __future__ import annotations

import logging

from unogen.model import StringifiedUtil

logger = logging.getLogger(__name__)

type CacheKey = tuple[str, str | None, str | None]
type CacheValue = tuple[StringifiedUtil, ...] | None


def build_cache_key(raw: str, alias: str | None = None, scope: str | None = None) -> CacheKey:
    """Return the cache key for a token, its alias placeholder and scope."""
    return (raw, alias, scope)


class TokenCache:
    """Flat token cache invalidated wholesale on config reload.

    ``None`` values remember "no match" so misses skip the dynamic rule
    scan next time. Writes carry the generation that was current when the
    resolution started and are dropped if a reset happened since.
    """

    def __init__(self) -> None:
        self._generation = 0
        self._entries: dict[CacheKey, CacheValue] = {}

    @property
    def generation(self) -> int:
        """Current config generation."""
        return self._generation

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: CacheKey) -> CacheValue:
        """Return the cached value; raises KeyError on a miss."""
        return self._entries[key]

    def store(self, key: CacheKey, value: CacheValue, *, generation: int) -> bool:
        """Store *value* unless *generation* is stale. Returns True when written."""
        if generation != self._generation:
            logger.debug("Dropping stale cache write for %r (generation %d != %d)", key[0], generation, self._generation)
            return False
        self._entries[key] = value
        return True

    def reset(self) -> None:
        """Invalidate every entry and start a new generation."""
        self._generation += 1
        self._entries = {}
        logger.debug("Token cache reset to generation %d", self._generation)
