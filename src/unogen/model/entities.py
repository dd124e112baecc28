"""Core records threaded through token resolution."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from unogen.types import CSSEntries

if TYPE_CHECKING:
    from unogen.engine.context import RuleContext


@dataclass(frozen=True)
class RuleMeta:
    """Metadata attached to a rule or shortcut."""

    layer: str | None = None
    no_merge: bool = False
    sort: int | None = None
    # Matching prefix stripped before the rule sees the token.
    prefix: str | None = None
    # Internal rules only match from inside shortcuts.
    internal: bool = False


@dataclass(frozen=True)
class VariantHandlerContext:
    """Composition state handed from one variant handler to the next."""

    selector: str
    entries: CSSEntries
    prefix: str = ""
    pseudo: str = ""
    parent: str | None = None
    parent_order: int | None = None
    layer: str | None = None
    sort: int | None = None
    no_merge: bool | None = None

    def evolve(self, **changes: object) -> VariantHandlerContext:
        """Return a copy with *changes* applied."""
        return replace(self, **changes)  # type: ignore[arg-type]


type SelectorRewrite = Callable[[str, CSSEntries], str | None]
type BodyRewrite = Callable[[CSSEntries], CSSEntries | None]
type HandleStage = Callable[[VariantHandlerContext, VariantHandlerContext], VariantHandlerContext]


@dataclass(frozen=True)
class VariantHandler:
    """Rewrite recorded by a matched variant, applied after rule matching.

    ``matcher`` is the token text left for the next stripping round. The
    optional rewrites run in ascending ``order``. ``handle`` is a wrapping
    stage: it receives the context as this handler saw it and the context the
    remaining handlers produced, and returns the context to pass outward.
    """

    matcher: str
    order: int | None = None
    selector: SelectorRewrite | None = None
    body: BodyRewrite | None = None
    parent: str | tuple[str, int] | None = None
    sort: int | None = None
    layer: str | None = None
    no_merge: bool | None = None
    handle: HandleStage | None = None


@dataclass(frozen=True)
class VariantMatch:
    """Outcome of variant stripping for one raw token."""

    raw: str
    current: str
    handlers: tuple[VariantHandler, ...] = ()
    variants: frozenset[int] = frozenset()

    @property
    def stripped(self) -> bool:
        """Whether any variant consumed part of the token."""
        return self.raw != self.current


@dataclass(frozen=True)
class RawUtil:
    """Raw CSS emitted directly by a rule, bypassing entry composition."""

    index: int
    css: str
    meta: RuleMeta | None = None


@dataclass(frozen=True)
class ParsedUtil:
    """Matched CSS entries plus the variant handlers still to apply."""

    index: int
    raw: str
    entries: CSSEntries
    meta: RuleMeta | None = None
    variant_handlers: tuple[VariantHandler, ...] = ()


type Util = ParsedUtil | RawUtil


@dataclass
class UtilObject:
    """Mutable result of the variant chain; postprocessors edit it in place."""

    selector: str
    entries: CSSEntries
    parent: str | None = None
    layer: str | None = None
    sort: int | None = None
    no_merge: bool | None = None


@dataclass(frozen=True)
class StringifiedUtil:
    """Terminal, cacheable unit of generated CSS."""

    index: int
    selector: str | None
    body: str
    parent: str | None = None
    meta: RuleMeta | None = None
    context: RuleContext | None = field(default=None, compare=False, repr=False)
    no_merge: bool | None = None

    @property
    def layer(self) -> str | None:
        """Layer requested by the rule or an overriding variant."""
        return self.meta.layer if self.meta is not None else None

    @property
    def sort(self) -> int:
        """Fine-tune sort value, defaulting to 0."""
        if self.meta is None or self.meta.sort is None:
            return 0
        return self.meta.sort

    @property
    def merge_blocked(self) -> bool:
        """Whether this utility must keep its own block."""
        if self.no_merge is not None:
            return self.no_merge
        return bool(self.meta is not None and self.meta.no_merge)
