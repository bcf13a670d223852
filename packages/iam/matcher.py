"""Glob pattern compiler and matcher.

Patterns support:
- Brace groups: ``docs/{public,shared}/*`` expands to two alternatives
- Wildcards: ``*`` matches any run of characters except ``/``
- Escapes: ``\\*`` and ``\\{`` match the character literally

A pattern is brace expanded first, then every alternative is compiled
into an exact string, an anchored regular expression, or an alternative
that never matches.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import NamedTuple, Union

from packages.iam.config import get_settings
from packages.iam.models import OversizedPatternError

logger = logging.getLogger(__name__)

_BRACE_SPAN = re.compile(r"\{.*\}")

SEPARATOR = "/"
WILDCARD = "*"
ESCAPE = "\\"


@dataclass(frozen=True)
class LiteralAlternative:
    """Matches one exact string."""

    text: str

    def matches(self, candidate: str) -> bool:
        return candidate == self.text


@dataclass(frozen=True)
class WildcardAlternative:
    """Matches an anchored wildcard expression."""

    source: str
    regex: re.Pattern[str]

    def matches(self, candidate: str) -> bool:
        return self.regex.fullmatch(candidate) is not None


@dataclass(frozen=True)
class UnmatchableAlternative:
    """Stands in for an alternative that failed to compile."""

    source: str

    def matches(self, candidate: str) -> bool:
        return False


CompiledAlternative = Union[LiteralAlternative, WildcardAlternative, UnmatchableAlternative]


class _BraceGroup(NamedTuple):
    pre: str
    body: str
    post: str


def _find_unescaped(text: str, char: str, start: int = 0) -> int:
    """Index of the first ``char`` not preceded by an escape, or -1."""
    i = start
    while i < len(text):
        if text[i] == ESCAPE:
            i += 2
            continue
        if text[i] == char:
            return i
        i += 1
    return -1


def _balanced(text: str) -> _BraceGroup | None:
    """Split around the first ``{`` and the first ``}`` after it."""
    left = _find_unescaped(text, "{")
    if left < 0:
        return None
    right = _find_unescaped(text, "}", left + 1)
    if right < 0:
        return None
    return _BraceGroup(text[:left], text[left + 1:right], text[right + 1:])


def expand(text: str, is_top: bool = False) -> list[str]:
    """Expand brace groups into the cross product of their parts.

    Groups are consumed left to right; each one multiplies the
    alternatives built so far by its comma separated parts. Empty
    results are only dropped at the top level.
    """
    expansions = [""]
    remainder = text
    while remainder:
        group = _balanced(remainder)
        # A prefix ending in "$" belongs to an uninterpolated ${...} placeholder
        if group is None or group.pre.endswith("$"):
            expansions = [prefix + remainder for prefix in expansions]
            break

        parts = group.body.split(",") if group.body else [""]
        expansions = [prefix + group.pre + part for prefix in expansions for part in parts]
        remainder = group.post

    if is_top:
        return [expansion for expansion in expansions if expansion]
    return expansions


def brace_expand(pattern: str) -> list[str]:
    """Expand a pattern into its literal/wildcard alternatives."""
    if not _BRACE_SPAN.search(pattern):
        return [pattern]

    # Bash keeps a leading "{}" as literal text, but only at the top level
    if pattern.startswith("{}"):
        pattern = "\\{\\}" + pattern[2:]

    return expand(pattern, is_top=True)


def _tokenize(alternative: str) -> list[str | None]:
    """Split into literal characters, with None marking a wildcard."""
    tokens: list[str | None] = []
    i = 0
    while i < len(alternative):
        char = alternative[i]
        if char == ESCAPE and i + 1 < len(alternative):
            tokens.append(alternative[i + 1])
            i += 2
            continue
        tokens.append(None if char == WILDCARD else char)
        i += 1
    return tokens


def _translate(tokens: list[str | None]) -> str:
    """Build the regular expression body for a wildcard alternative."""
    segments: list[list[str | None]] = [[]]
    for token in tokens:
        if token == SEPARATOR:
            segments.append([])
        else:
            segments[-1].append(token)

    translated = []
    for segment in segments:
        body = "".join("[^/]*?" if t is None else re.escape(t) for t in segment)
        # A segment made only of wildcards must not match empty
        if segment and all(t is None for t in segment):
            body = "(?=[^/])" + body
        translated.append(body)

    # Never match the empty string
    return "(?=.)" + re.escape(SEPARATOR).join(translated)


class PatternCompiler:
    """Compiles pattern strings into sets of alternatives.

    Compiled sets are memoised per pattern string. The cache only saves
    work; a fresh compiler produces the same results.
    """

    def __init__(
        self,
        max_pattern_length: int = 1024 * 64,
        cache_size: int = 1024,
    ):
        self.max_pattern_length = max_pattern_length
        self.cache_size = cache_size

        if cache_size > 0:
            self._compile = lru_cache(maxsize=cache_size)(self._compile_uncached)
        else:
            self._compile = self._compile_uncached

        logger.info(
            "PatternCompiler initialized (max_length=%d, cache_size=%d)",
            max_pattern_length, cache_size
        )

    def compile(self, pattern: str) -> tuple[CompiledAlternative, ...]:
        """Compile a pattern into its non-empty alternatives."""
        return self._compile(pattern)

    def _compile_uncached(self, pattern: str) -> tuple[CompiledAlternative, ...]:
        compiled = [self.parse(alternative) for alternative in brace_expand(pattern)]
        alternatives = tuple(
            alt for alt in compiled
            if not (isinstance(alt, LiteralAlternative) and not alt.text)
        )
        logger.debug("Compiled pattern %r into %d alternatives", pattern, len(alternatives))
        return alternatives

    def parse(self, alternative: str) -> CompiledAlternative:
        """Compile a single brace-free alternative.

        Raises:
            OversizedPatternError: If the alternative exceeds the length guard
        """
        if len(alternative) > self.max_pattern_length:
            raise OversizedPatternError(len(alternative), self.max_pattern_length)

        tokens = _tokenize(alternative)

        # Skip the regex for wildcard-free alternatives
        if None not in tokens:
            return LiteralAlternative("".join(tokens))

        source = _translate(tokens)
        try:
            regex = re.compile(source)
        except re.error as exc:
            logger.warning("Pattern %r can never match: %s", alternative, exc)
            return UnmatchableAlternative(alternative)

        return WildcardAlternative(source, regex)

    def cache_clear(self) -> None:
        """Drop memoised patterns."""
        if self.cache_size > 0:
            self._compile.cache_clear()


# Singleton instance
_pattern_compiler: PatternCompiler | None = None


def get_pattern_compiler() -> PatternCompiler:
    """Get the pattern compiler singleton."""
    global _pattern_compiler
    if _pattern_compiler is None:
        settings = get_settings()
        _pattern_compiler = PatternCompiler(
            max_pattern_length=settings.max_pattern_length,
            cache_size=settings.pattern_cache_size,
        )
    return _pattern_compiler


def reset_pattern_compiler() -> None:
    """Forget the compiler singleton so the next call re-reads settings."""
    global _pattern_compiler
    _pattern_compiler = None


class Matcher:
    """Compiled form of one pattern string.

    Usage:
        matcher = Matcher("docs/{public,shared}/*")
        matcher.match("docs/public/readme")  # True
        matcher.match("docs/private/readme")  # False
    """

    def __init__(self, pattern: str, compiler: PatternCompiler | None = None):
        self._pattern = pattern.strip()
        self._empty = not self._pattern
        self._alternatives = (compiler or get_pattern_compiler()).compile(self._pattern)

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def empty(self) -> bool:
        """Whether the pattern was blank (matches only the empty string)."""
        return self._empty

    @property
    def alternatives(self) -> tuple[CompiledAlternative, ...]:
        return self._alternatives

    def match(self, candidate: str) -> bool:
        """Check whether any alternative matches the candidate in full."""
        if self._empty:
            return candidate == ""

        return any(alt.matches(candidate) for alt in self._alternatives)

    def __repr__(self) -> str:
        return f"Matcher({self._pattern!r})"
