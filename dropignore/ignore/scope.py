"""
ScopeStack: the RuleSets in effect for the directory being processed
"""

from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

from .rule_set import RuleSet


class ScopeStack:
    """
    Immutable, ordered collection of active RuleSets (root-most first)

    push() and pop() return new stacks and leave the receiver untouched.
    A recursive walk hands each child directory its own stack, so a
    parent's scope is restored simply by returning from the child call.
    """

    __slots__ = ('_rule_sets',)

    def __init__(self, rule_sets: Tuple[RuleSet, ...] = ()):
        self._rule_sets = tuple(rule_sets)

    def push(self, rule_set: Optional[RuleSet]) -> 'ScopeStack':
        """
        Enter a directory scope

        Args:
            rule_set: RuleSet defined by the directory, or None

        Returns:
            A stack with rule_set appended, or this stack when None
        """
        if rule_set is None:
            return self
        return ScopeStack(self._rule_sets + (rule_set,))

    def pop(self) -> 'ScopeStack':
        """Leave the innermost scope"""
        if not self._rule_sets:
            raise IndexError("pop from empty ScopeStack")
        return ScopeStack(self._rule_sets[:-1])

    def is_ignored(self, file_path: Union[str, Path]) -> bool:
        """
        True if any active RuleSet matches the file

        Args:
            file_path: Absolute path of the file

        Returns:
            Union of all RuleSet verdicts
        """
        return any(rule_set.matches(file_path) for rule_set in self._rule_sets)

    def matching_rule_sets(self, file_path: Union[str, Path]) -> Tuple[RuleSet, ...]:
        """RuleSets that select the file, root-most first"""
        return tuple(rs for rs in self._rule_sets if rs.matches(file_path))

    @property
    def depth(self) -> int:
        return len(self._rule_sets)

    @property
    def rule_sets(self) -> Tuple[RuleSet, ...]:
        return self._rule_sets

    def __len__(self) -> int:
        return len(self._rule_sets)

    def __iter__(self) -> Iterator[RuleSet]:
        return iter(self._rule_sets)

    def __repr__(self) -> str:
        dirs = ', '.join(str(rs.source_dir) for rs in self._rule_sets)
        return f"ScopeStack([{dirs}])"
