"""
Exceptions raised while walking a tree and synchronizing ignore markers.

Each error is scoped to the smallest unit it affects (a rule file, a
directory subtree or a single file) so callers can skip that unit and
carry on with the rest of the walk.
"""

from pathlib import Path
from typing import Optional, Union


class DropIgnoreError(Exception):
    """Base class for all dropignore errors."""
    pass


class RuleFileUnreadable(DropIgnoreError):
    """Raised when a rule file cannot be opened, decoded or is too large."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot read rule file {self.path}: {reason}")


class PatternSyntaxError(DropIgnoreError):
    """Raised when a rule file contains a pattern the matcher rejects."""

    def __init__(self, path: Optional[Union[str, Path]], pattern: str,
                 line: int, reason: str):
        self.path = Path(path) if path is not None else None
        self.pattern = pattern
        self.line = line
        self.reason = reason
        location = f"{self.path}:{line}" if self.path is not None else f"line {line}"
        super().__init__(f"{location}: invalid pattern '{pattern}': {reason}")


class DirectoryEnumerationError(DropIgnoreError):
    """Raised when the contents of a directory cannot be listed."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot enumerate directory {self.path}: {reason}")


class AttrError(DropIgnoreError):
    """Raised by an attribute service when a set or clear command fails."""

    def __init__(self, path: Union[str, Path], operation: str, reason: str):
        self.path = Path(path)
        self.operation = operation
        self.reason = reason
        super().__init__(f"Cannot {operation} ignore marker on {self.path}: {reason}")


class WalkCancelled(DropIgnoreError):
    """Raised at a directory boundary once cancellation was requested."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"Walk cancelled before entering {self.path}")
