"""Policy statements.

A statement combines an effect, action patterns, resource patterns and
optional conditions. Patterns are interpolated against the request
context and compiled into fresh matchers on every evaluation.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.iam.context import apply_context, get_value_from_path
from packages.iam.matcher import Matcher
from packages.iam.models import MissingResolverError, StatementEffect
from packages.iam.resolvers import ConditionResolver

logger = logging.getLogger(__name__)


class Statement(BaseModel):
    """A single allow/deny rule over actions and resources.

    Conditions map a resolver name to context paths and the values
    expected at those paths:

        Statement(
            action="read",
            resource="docs/${user.department}/*",
            condition={"equals": {"user.role": "editor"}},
        )

    Statements are immutable and safe to evaluate from several threads.
    """

    model_config = ConfigDict(frozen=True)

    effect: StatementEffect = Field(
        default=StatementEffect.ALLOW,
        description="Allow or deny"
    )
    resource: tuple[str, ...] = Field(
        min_length=1,
        description="Resource patterns (a single string is accepted)"
    )
    action: tuple[str, ...] = Field(
        min_length=1,
        description="Action patterns (a single string is accepted)"
    )
    condition: Mapping[str, Mapping[str, Any]] | None = Field(
        default=None,
        description="Resolver name -> context path -> expected value"
    )

    @field_validator("resource", "action", mode="before")
    @classmethod
    def normalize_patterns(cls, value: Any) -> Any:
        """Wrap a bare pattern string in a tuple."""
        if isinstance(value, str):
            return (value,)
        return value

    @field_validator("condition")
    @classmethod
    def freeze_condition(
        cls, value: Mapping[str, Mapping[str, Any]] | None
    ) -> Mapping[str, Mapping[str, Any]] | None:
        """Copy the condition map into read-only views."""
        if value is None:
            return None
        return MappingProxyType({
            name: MappingProxyType(dict(expectations))
            for name, expectations in value.items()
        })

    @classmethod
    def from_config(cls, config: "Statement | Mapping[str, Any]") -> "Statement":
        """Build a statement from a declarative config mapping."""
        if isinstance(config, Statement):
            return config
        return cls.model_validate(dict(config))

    @property
    def condition_names(self) -> set[str]:
        """Names of the resolvers that conditions with paths refer to."""
        return {name for name, expectations in (self.condition or {}).items() if expectations}

    def missing_resolvers(self, resolvers: Mapping[str, ConditionResolver]) -> set[str]:
        """Resolver names referenced by conditions but absent from a table."""
        return self.condition_names - set(resolvers)

    def matches_action(self, action: str, context: Any = None) -> bool:
        """Check if any action pattern matches."""
        return any(
            Matcher(apply_context(pattern, context)).match(action)
            for pattern in self.action
        )

    def matches_resource(self, resource: str, context: Any = None) -> bool:
        """Check if any resource pattern matches."""
        return any(
            Matcher(apply_context(pattern, context)).match(resource)
            for pattern in self.resource
        )

    def matches_conditions(
        self,
        context: Any = None,
        condition_resolvers: Mapping[str, ConditionResolver] | None = None,
    ) -> bool:
        """Check every condition against the context.

        Conditions only apply when resolvers, conditions and context are
        all present; otherwise they are satisfied.

        Raises:
            MissingResolverError: If a condition names an unknown resolver
        """
        if condition_resolvers is None or self.condition is None or context is None:
            return True

        for name, expectations in self.condition.items():
            # Resolvers are only looked up for conditions that have paths
            resolver = None
            for path, expected in expectations.items():
                if resolver is None:
                    resolver = condition_resolvers.get(name)
                    if resolver is None:
                        logger.warning("Condition references unknown resolver: %s", name)
                        raise MissingResolverError(name)

                if not resolver(get_value_from_path(context, path), expected):
                    logger.debug("Condition %s failed for path %s", name, path)
                    return False

        return True

    def matches(
        self,
        action: str,
        resource: str,
        context: Any = None,
        condition_resolvers: Mapping[str, ConditionResolver] | None = None,
    ) -> bool:
        """Check if this statement matches a request.

        Args:
            action: Requested action (e.g. ``"read"``)
            resource: Requested resource (e.g. ``"docs/readme"``)
            context: Optional nested context for placeholders and conditions
            condition_resolvers: Optional resolver table keyed by name

        Returns:
            True if an action pattern, a resource pattern and every
            condition match

        Raises:
            OversizedPatternError: If an expanded pattern is too long
            MissingResolverError: If a condition names an unknown resolver
        """
        return (
            self.matches_action(action, context)
            and self.matches_resource(resource, context)
            and self.matches_conditions(context, condition_resolvers)
        )

    def evaluate(
        self,
        action: str,
        resource: str,
        context: Any = None,
        condition_resolvers: Mapping[str, ConditionResolver] | None = None,
    ) -> StatementEffect | None:
        """Evaluate the statement against a request.

        Returns:
            The statement's effect if it matches, None otherwise
        """
        if self.matches(action, resource, context, condition_resolvers):
            logger.debug(
                "Statement %s matched: action=%s resource=%s",
                self.effect.value, action, resource
            )
            return self.effect
        return None
