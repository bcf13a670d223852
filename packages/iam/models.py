"""Statement data models and error types.

Defines statement effects and the errors raised while matching.
"""

from enum import Enum


class StatementEffect(str, Enum):
    """Effect of a policy statement."""

    ALLOW = "allow"
    DENY = "deny"


class PolicyError(Exception):
    """Base error for statement evaluation."""

    def __init__(self, message: str, code: str = "policy_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class OversizedPatternError(PolicyError, ValueError):
    """Raised when an expanded pattern exceeds the length guard."""

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(
            f"Pattern is too long ({length} > {limit} characters)",
            "pattern_too_long"
        )


class MissingResolverError(PolicyError, LookupError):
    """Raised when a condition names a resolver that was not supplied."""

    def __init__(self, resolver_name: str):
        self.resolver_name = resolver_name
        super().__init__(
            f"No condition resolver registered for '{resolver_name}'",
            "missing_resolver"
        )
