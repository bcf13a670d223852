"""Built-in condition resolvers.

A condition resolver compares a value observed in the request context
with the value expected by a statement. Statements reference resolvers
by name:

    {"condition": {"equals": {"user.department": "Engineering"}}}

Callers pass the resolver table to ``Statement.matches``; this module
provides a default table that can be extended.
"""

from __future__ import annotations

from typing import Any, Callable

ConditionResolver = Callable[[Any, Any], bool]


def _equals(observed: Any, expected: Any) -> bool:
    return observed is not None and observed == expected


def _not_equals(observed: Any, expected: Any) -> bool:
    return observed != expected


def _in(observed: Any, expected: Any) -> bool:
    if observed is None:
        return False
    try:
        return observed in expected
    except TypeError:
        return False


def _not_in(observed: Any, expected: Any) -> bool:
    return not _in(observed, expected)


def _contains(observed: Any, expected: Any) -> bool:
    if observed is None:
        return False
    try:
        return expected in observed
    except TypeError:
        return False


def _starts_with(observed: Any, expected: Any) -> bool:
    return observed is not None and str(observed).startswith(str(expected))


def _ends_with(observed: Any, expected: Any) -> bool:
    return observed is not None and str(observed).endswith(str(expected))


def _ordering(compare: Callable[[Any, Any], bool]) -> ConditionResolver:
    """Wrap a comparison so missing or incomparable values never match."""

    def resolver(observed: Any, expected: Any) -> bool:
        if observed is None:
            return False
        try:
            return bool(compare(observed, expected))
        except TypeError:
            return False

    return resolver


DEFAULT_CONDITION_RESOLVERS: dict[str, ConditionResolver] = {
    "equals": _equals,
    "not_equals": _not_equals,
    "in": _in,
    "not_in": _not_in,
    "contains": _contains,
    "starts_with": _starts_with,
    "ends_with": _ends_with,
    "greater_than": _ordering(lambda a, b: a > b),
    "less_than": _ordering(lambda a, b: a < b),
    "greater_or_equal": _ordering(lambda a, b: a >= b),
    "less_or_equal": _ordering(lambda a, b: a <= b),
}


def get_condition_resolvers(**overrides: ConditionResolver) -> dict[str, ConditionResolver]:
    """Get a copy of the default resolver table with overrides applied."""
    resolvers = dict(DEFAULT_CONDITION_RESOLVERS)
    resolvers.update(overrides)
    return resolvers
