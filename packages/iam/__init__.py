"""IAM Statement Matching Package.

Glob-style action/resource patterns with brace expansion, context
placeholders and pluggable condition resolvers.

Usage:
    from packages.iam import Statement, get_condition_resolvers

    statement = Statement(
        effect="allow",
        action=["read", "list"],
        resource="docs/${user.department}/*",
        condition={"equals": {"user.role": "editor"}},
    )

    context = {"user": {"department": "engineering", "role": "editor"}}
    if statement.matches("read", "docs/engineering/readme", context, get_condition_resolvers()):
        # Allowed
        pass
"""

from packages.iam.config import MatcherSettings, get_settings
from packages.iam.context import apply_context, get_value_from_path
from packages.iam.matcher import (
    CompiledAlternative,
    LiteralAlternative,
    Matcher,
    PatternCompiler,
    UnmatchableAlternative,
    WildcardAlternative,
    brace_expand,
    get_pattern_compiler,
    reset_pattern_compiler,
)
from packages.iam.models import (
    MissingResolverError,
    OversizedPatternError,
    PolicyError,
    StatementEffect,
)
from packages.iam.resolvers import (
    DEFAULT_CONDITION_RESOLVERS,
    ConditionResolver,
    get_condition_resolvers,
)
from packages.iam.statement import Statement

__all__ = [
    "MatcherSettings",
    "get_settings",
    "apply_context",
    "get_value_from_path",
    "CompiledAlternative",
    "LiteralAlternative",
    "Matcher",
    "PatternCompiler",
    "UnmatchableAlternative",
    "WildcardAlternative",
    "brace_expand",
    "get_pattern_compiler",
    "reset_pattern_compiler",
    "MissingResolverError",
    "OversizedPatternError",
    "PolicyError",
    "StatementEffect",
    "DEFAULT_CONDITION_RESOLVERS",
    "ConditionResolver",
    "get_condition_resolvers",
    "Statement",
]
