"""Core data models for unogen."""

from .entities import (
    ParsedUtil,
    RawUtil,
    RuleMeta,
    StringifiedUtil,
    Util,
    UtilObject,
    VariantHandler,
    VariantHandlerContext,
    VariantMatch,
)

__all__ = [
    "ParsedUtil",
    "RawUtil",
    "RuleMeta",
    "StringifiedUtil",
    "Util",
    "UtilObject",
    "VariantHandler",
    "VariantHandlerContext",
    "VariantMatch",
]
