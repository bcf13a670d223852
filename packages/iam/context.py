"""Context lookup and template interpolation.

Patterns may reference request context with ``${path}`` placeholders,
e.g. ``"users/${user.id}/*"``. Placeholders are replaced before the
pattern is compiled, so a list value rendered as ``{a,b}`` still takes
part in brace expansion.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_PLACEHOLDER = re.compile(r"\$\{[^}]*\}")
_EXTRA_WHITESPACE = re.compile(r" +(?= )|^\s+|\s+$")

# Values that are never walked by attribute
_SCALARS = (str, bytes, int, float, bool)


def _step(current: Any, key: str) -> Any:
    """Resolve one path segment, returning None when it is absent."""
    if isinstance(current, Mapping):
        return current.get(key)
    if isinstance(current, (list, tuple)):
        if key.isascii() and key.isdecimal() and int(key) < len(current):
            return current[int(key)]
        return None
    if isinstance(current, _SCALARS):
        return None
    return getattr(current, key, None)


def _to_text(value: Any) -> str:
    """Render a context value the way it appears inside a pattern."""
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else _to_text(item) for item in value)
    return str(value)


def get_value_from_path(context: Any, path: str) -> Any:
    """Look up a dotted key path inside a nested context.

    Args:
        context: Nested mappings, sequences or objects
        path: Dot separated keys (e.g. ``"user.department"``)

    Returns:
        The resolved value, None if any segment is absent. Lists and
        tuples are rendered as a brace group string (``"{a,b,c}"``).
    """
    current = context
    for key in path.split("."):
        if current is None:
            return None
        current = _step(current, key)

    if isinstance(current, (list, tuple)):
        return "{" + _to_text(current) + "}"

    return current


def apply_context(pattern: str, context: Any = None) -> str:
    """Substitute ``${path}`` placeholders in a pattern.

    Without a context the pattern is returned unchanged. Absent values
    render as ``"undefined"``. Whitespace left behind by substitution is
    trimmed and runs of spaces are collapsed.
    """
    if context is None:
        return pattern

    def replace(match: re.Match[str]) -> str:
        path = match.group(0)[2:-1]
        return _to_text(get_value_from_path(context, path))

    return _EXTRA_WHITESPACE.sub("", _PLACEHOLDER.sub(replace, pattern))
