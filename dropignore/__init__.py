"""
dropignore - keep Dropbox away from files matched by .dropIgnore rules

Walks a directory tree, evaluates every .dropIgnore file on the way down
and sets or clears the com.dropbox.ignored marker on each file.
"""

__version__ = "1.0.0"

from .config import DropIgnoreConfig
from .errors import (
    AttrError,
    DirectoryEnumerationError,
    DropIgnoreError,
    PatternSyntaxError,
    RuleFileUnreadable,
    WalkCancelled,
)
from .ignore import RuleSet, ScopeStack
from .sync import AttributeSynchronizer, SyncStats
from .walker import TreeWalker, WalkResult, WalkStats

__all__ = [
    '__version__',
    'AttrError',
    'AttributeSynchronizer',
    'DirectoryEnumerationError',
    'DropIgnoreConfig',
    'DropIgnoreError',
    'PatternSyntaxError',
    'RuleFileUnreadable',
    'RuleSet',
    'ScopeStack',
    'SyncStats',
    'TreeWalker',
    'WalkCancelled',
    'WalkResult',
    'WalkStats',
]
