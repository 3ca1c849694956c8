"""
Pattern matching capability for gitignore-style rules

The walker never interprets glob syntax itself. It asks a PatternMatcher
to compile a rule file's patterns and then asks the compiled object
whether a relative path matches.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, Tuple

import pathspec

from .constants import PATTERN_SYNTAX
from ..errors import PatternSyntaxError
from ..utils import get_logger

logger = get_logger(__name__)


class PatternMatcher(ABC):
    """Compiles ignore patterns into objects exposing match_file(path)"""

    @abstractmethod
    def compile(self, patterns: Sequence[str]):
        """
        Compile patterns into a matcher

        Args:
            patterns: Ignore patterns in file order

        Returns:
            Object with a match_file(path) -> bool method

        Raises:
            PatternSyntaxError: If a pattern cannot be compiled
        """
        raise NotImplementedError("Subclasses must implement compile")

    def validate_pattern(self, pattern: str) -> Tuple[bool, Optional[str]]:
        """
        Validate a single pattern

        Args:
            pattern: Pattern to validate

        Returns:
            Tuple of (is_valid, error_message)
        """
        try:
            self.compile([pattern])
            return True, None
        except PatternSyntaxError as e:
            return False, e.reason

    def matches(self, pattern: str, path: str) -> bool:
        """Check a single pattern against a path"""
        return self.compile([pattern]).match_file(path)


class PathSpecMatcher(PatternMatcher):
    """
    PatternMatcher backed by pathspec's gitwildmatch implementation

    Negated patterns (!) re-include paths matched by earlier patterns of
    the same compiled list.
    """

    def __init__(self, syntax: str = PATTERN_SYNTAX):
        self.syntax = syntax
        self._compiled_cache: Dict[Tuple[str, ...], pathspec.PathSpec] = {}

    def compile(self, patterns: Sequence[str]) -> pathspec.PathSpec:
        # Order matters for negation, so the cache key keeps it
        cache_key = tuple(patterns)
        if cache_key in self._compiled_cache:
            return self._compiled_cache[cache_key]

        for line_num, pattern in enumerate(patterns, 1):
            try:
                pathspec.PathSpec.from_lines(self.syntax, [pattern])
            except Exception as e:
                raise PatternSyntaxError(None, pattern, line_num, str(e)) from e

        spec = pathspec.PathSpec.from_lines(self.syntax, patterns)
        self._compiled_cache[cache_key] = spec
        logger.trace(f"Compiled {len(patterns)} patterns")
        return spec


_default_matcher: Optional[PatternMatcher] = None


def get_default_matcher() -> PatternMatcher:
    """Shared PathSpecMatcher instance"""
    global _default_matcher
    if _default_matcher is None:
        _default_matcher = PathSpecMatcher()
    return _default_matcher
