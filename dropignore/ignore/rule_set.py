"""
RuleSet: the immutable patterns contributed by one rule file
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple, Union

from .file_loader import IgnoreFileLoader
from .matcher import PatternMatcher, get_default_matcher
from ..utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RuleSet:
    """
    Patterns loaded from a single rule file, anchored at its directory

    Paths are matched relative to source_dir, the way git evaluates a
    nested .gitignore. Negation only applies within this RuleSet.
    """
    source_dir: Path
    patterns: Tuple[str, ...]
    spec: Any = field(compare=False, repr=False)
    rule_file: Optional[Path] = None

    @classmethod
    def load(cls, path: Union[str, Path],
             matcher: Optional[PatternMatcher] = None,
             loader: Optional[IgnoreFileLoader] = None) -> 'RuleSet':
        """
        Load a RuleSet from a rule file

        Args:
            path: Path to the rule file
            matcher: Pattern matcher used to compile the patterns
            loader: Loader used to read and validate the file

        Returns:
            RuleSet anchored at the rule file's directory

        Raises:
            RuleFileUnreadable: If the file cannot be read
            PatternSyntaxError: If any pattern is invalid
        """
        path = Path(path)
        matcher = matcher or get_default_matcher()
        loader = loader or IgnoreFileLoader(path.name, matcher)

        info = loader.load_file(path)
        rule_set = cls.from_patterns(path.parent, info.patterns, matcher, rule_file=path)

        logger.info(f"Loaded {len(rule_set)} rules from {path}")
        for pattern in rule_set.patterns:
            logger.debug(f"  {pattern}")

        return rule_set

    @classmethod
    def from_patterns(cls, source_dir: Union[str, Path], patterns: Iterable[str],
                      matcher: Optional[PatternMatcher] = None,
                      rule_file: Optional[Path] = None) -> 'RuleSet':
        """Build a RuleSet from in-memory patterns"""
        matcher = matcher or get_default_matcher()
        patterns = tuple(patterns)
        return cls(
            source_dir=Path(source_dir),
            patterns=patterns,
            spec=matcher.compile(patterns),
            rule_file=rule_file,
        )

    def __len__(self) -> int:
        return len(self.patterns)

    def matches(self, file_path: Union[str, Path]) -> bool:
        """
        Check whether a file is matched by this RuleSet

        Args:
            file_path: Absolute path, or path relative to source_dir

        Returns:
            True if the patterns select the file
        """
        if not self.patterns:
            return False

        path = Path(file_path)
        if path.is_absolute():
            try:
                path = path.relative_to(self.source_dir)
            except ValueError:
                # Outside this rule file's subtree
                return False

        rel_path = path.as_posix()
        if rel_path in ('', '.'):
            return False

        matched = self.spec.match_file(rel_path)
        logger.trace(f"{self.source_dir}: {rel_path} -> {matched}")
        return matched
