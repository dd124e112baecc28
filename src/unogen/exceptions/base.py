"""Root exception for unogen."""

from __future__ import annotations


class UnoError(Exception):
    """Base class for all errors raised by unogen."""
