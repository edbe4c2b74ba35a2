from __future__ import annotations

from typing import Any

# Backslash must come first so later escapes are not doubled.
_REPLACEMENTS = (
    ("\\", "\\\\"),
    ("\n", "\\n"),
    (",", "\\,"),
    (";", "\\;"),
)


def escape_string(value: Any) -> str:
    """Escape a TEXT property value for an ICS content line."""
    if value is None:
        return ""
    text = str(value)
    for old, new in _REPLACEMENTS:
        text = text.replace(old, new)
    return text
