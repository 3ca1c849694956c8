"""
Ignore rule processing for dropignore

This module provides the cascading rule engine:
- .dropIgnore files at any directory level
- RuleSets anchored at the directory that defines them
- ScopeStack union of every RuleSet above a file
"""

from .constants import IGNORE_FILENAME
from .matcher import PatternMatcher, PathSpecMatcher, get_default_matcher
from .file_loader import IgnoreFileLoader, IgnoreFileInfo
from .rule_set import RuleSet
from .scope import ScopeStack
from .init import init_ignore_file, generate_ignore_content

__all__ = [
    'IGNORE_FILENAME',
    'PatternMatcher',
    'PathSpecMatcher',
    'get_default_matcher',
    'IgnoreFileLoader',
    'IgnoreFileInfo',
    'RuleSet',
    'ScopeStack',
    'init_ignore_file',
    'generate_ignore_content',
]
