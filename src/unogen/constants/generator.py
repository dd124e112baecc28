"""Engine-level constants: layers, control keys, and matching limits."""

from __future__ import annotations

import re
import sys

LAYER_DEFAULT: str = "default"
LAYER_PREFLIGHTS: str = "preflights"
LAYER_SHORTCUTS: str = "shortcuts"
LAYER_IMPORTS: str = "imports"

DEFAULT_LAYERS: dict[str, int] = {
    LAYER_IMPORTS: -200,
    LAYER_PREFLIGHTS: -100,
    LAYER_SHORTCUTS: -10,
    LAYER_DEFAULT: 0,
}

# Entries whose key starts with this prefix steer the engine and are never rendered.
CONTROL_KEY_PREFIX: str = "$$"
CONTROL_SHORTCUT_NO_MERGE: str = "$$shortcut-no-merge"

# Nested parents ("@media ... $$ @supports ...") and the scope slot in selectors.
PARENT_SEPARATOR: str = " $$ "
SCOPE_PLACEHOLDER: str = " $$ "

SHORTCUT_MAX_DEPTH: int = 5
VARIANT_MAX_HANDLERS: int = 500
VARIANT_GROUP_MAX_DEPTH: int = 5

# Inline CSS objects inside a shortcut sort after every declared rule.
INLINE_ENTRY_INDEX: int = sys.maxsize
INLINE_ENTRY_RAW: str = "{inline}"

SPLIT_PATTERN: re.Pattern[str] = re.compile(r"\\?[\s'\"`;{}]+")
VALID_SELECTOR_PATTERN: re.Pattern[str] = re.compile(r"[\w\u00A0-\uFFFF\-_%-?]")

REGEX_BLOCKLIST_DELIMITER: str = "/"
