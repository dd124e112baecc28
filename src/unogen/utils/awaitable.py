"""Await values that may or may not be awaitable."""

from __future__ import annotations

import inspect

from unogen.types import MaybeAwaitable


async def maybe_await[T](value: MaybeAwaitable[T]) -> T:
    """Return *value*, awaiting it first when a matcher returned a coroutine."""
    if inspect.isawaitable(value):
        return await value
    return value
