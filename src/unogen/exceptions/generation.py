"""Per-token failures raised while resolving a utility."""

from __future__ import annotations

from unogen.exceptions.base import UnoError


class GenerationError(UnoError):
    """Failure local to one token; sibling tokens keep resolving."""

    def __init__(self, token: str, message: str) -> None:
        super().__init__(message)
        self.token = token


class ShortcutCycleError(GenerationError):
    """A shortcut expanded back into itself."""

    def __init__(self, token: str, path: tuple[str, ...]) -> None:
        chain = " -> ".join((*path, token))
        super().__init__(token, f'Shortcut cycle detected for "{token}": {chain}')
        self.path = path


class TokenResolutionError(GenerationError):
    """A rule, shortcut or variant matcher failed for a token."""
