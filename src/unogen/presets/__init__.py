"""Built-in presets."""

from __future__ import annotations

from unogen.presets.basic import preset_basic

__all__ = ["preset_basic"]
