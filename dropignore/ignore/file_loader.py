"""
File loader for parsing and validating rule files
"""

from pathlib import Path
from typing import List, Optional, Dict
from dataclasses import dataclass, field

from .constants import (
    COMMENT_PREFIX,
    IGNORE_FILENAME,
    MAX_IGNORE_FILE_SIZE,
    MAX_PATTERNS_PER_FILE,
)
from .matcher import PatternMatcher, get_default_matcher
from ..errors import PatternSyntaxError, RuleFileUnreadable
from ..utils import get_logger

logger = get_logger(__name__)


@dataclass
class ValidationWarning:
    """Represents a validation warning in a rule file"""
    line: int
    pattern: str
    message: str


@dataclass
class IgnoreFileInfo:
    """Information about a loaded rule file"""
    path: Path
    patterns: List[str]
    lines: List[int] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def has_warnings(self) -> bool:
        """Check if file has warnings"""
        return len(self.warnings) > 0


class IgnoreFileLoader:
    """
    Handles loading, parsing, and validating rule files
    """

    def __init__(self, ignore_filename: str = IGNORE_FILENAME,
                 matcher: Optional[PatternMatcher] = None):
        """
        Initialize loader

        Args:
            ignore_filename: Name of rule files to look for
            matcher: Pattern matcher used to validate patterns
        """
        self.ignore_filename = ignore_filename
        self.matcher = matcher or get_default_matcher()

    def rule_file_for(self, directory: Path) -> Path:
        """Candidate rule file path for a directory"""
        return directory / self.ignore_filename

    def load_file(self, file_path: Path) -> IgnoreFileInfo:
        """
        Load and validate a rule file

        Args:
            file_path: Path to the rule file

        Returns:
            IgnoreFileInfo with patterns, their line numbers and warnings

        Raises:
            RuleFileUnreadable: If the file cannot be read or decoded
            PatternSyntaxError: If a pattern is rejected by the matcher
        """
        file_path = Path(file_path)

        try:
            file_size = file_path.stat().st_size
        except OSError as e:
            raise RuleFileUnreadable(file_path, f"cannot stat file: {e}") from e

        if file_size > MAX_IGNORE_FILE_SIZE:
            raise RuleFileUnreadable(
                file_path,
                f"file too large: {file_size} bytes (max: {MAX_IGNORE_FILE_SIZE})"
            )

        try:
            with open(file_path, 'r', encoding='utf-8-sig') as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise RuleFileUnreadable(file_path, str(e)) from e

        info = IgnoreFileInfo(
            path=file_path,
            patterns=[],
            stats={
                'total_lines': len(lines),
                'empty_lines': 0,
                'comment_lines': 0,
                'pattern_lines': 0,
            }
        )

        for line_num, line in enumerate(lines, 1):
            stripped = line.strip()

            if not stripped:
                info.stats['empty_lines'] += 1
                continue

            if stripped.startswith(COMMENT_PREFIX):
                info.stats['comment_lines'] += 1
                continue

            info.stats['pattern_lines'] += 1

            is_valid, validation_msg = self.matcher.validate_pattern(stripped)
            if not is_valid:
                raise PatternSyntaxError(
                    file_path, stripped, line_num, validation_msg or "Invalid pattern"
                )

            info.patterns.append(stripped)
            info.lines.append(line_num)

            for warning_msg in self._check_pattern_warnings(stripped):
                info.warnings.append(ValidationWarning(
                    line=line_num,
                    pattern=stripped,
                    message=warning_msg
                ))

        if len(info.patterns) > MAX_PATTERNS_PER_FILE:
            logger.warning(
                f"{file_path}: too many patterns ({len(info.patterns)}), "
                f"only the first {MAX_PATTERNS_PER_FILE} are used"
            )
            info.patterns = info.patterns[:MAX_PATTERNS_PER_FILE]
            info.lines = info.lines[:MAX_PATTERNS_PER_FILE]

        for warning in info.warnings:
            logger.warning(f"{file_path}:{warning.line}: {warning.message}")

        return info

    def _check_pattern_warnings(self, pattern: str) -> List[str]:
        """
        Check pattern for potential issues that aren't errors

        Args:
            pattern: Pattern to check

        Returns:
            List of warning messages
        """
        warnings = []

        # Windows users tend to paste paths with backslashes
        if '\\' in pattern and not pattern.startswith('\\'):
            warnings.append(
                "Pattern contains backslash. Use forward slashes for paths."
            )

        if pattern in ['*', '**', '**/*']:
            warnings.append(
                "Very broad pattern - every file below this directory will be ignored"
            )

        if pattern.startswith('*.') and '/' in pattern:
            warnings.append(
                "Extension pattern with path separator - this may not work as expected"
            )

        return warnings
