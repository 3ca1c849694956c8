"""
Depth-first tree walk that evaluates cascading .dropIgnore rules

Each directory visit moves through the same steps:

1. Entering: check for cancellation and cycles, locate the rule file
2. ScopeLoaded: load the rule file (if any) into a new ScopeStack value
3. ChildrenProcessed: visit every direct subdirectory with that stack
4. FilesReconciled: compute a verdict for every direct file
5. Exited: the stack value goes out of scope with the call

Because the ScopeStack is an immutable value handed to each recursive
call, a parent's scope is never affected by what happens in a child,
including a child that failed halfway through.
"""

import os
import threading
import time
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple, Union

from .config import DropIgnoreConfig
from .errors import (
    DirectoryEnumerationError,
    PatternSyntaxError,
    RuleFileUnreadable,
    WalkCancelled,
)
from .ignore import IgnoreFileLoader, PatternMatcher, RuleSet, ScopeStack, get_default_matcher
from .ignore.constants import IGNORE_FILENAME
from .sync import AttributeSynchronizer, SyncStats
from .utils import get_logger

logger = get_logger(__name__)

Verdict = Tuple[Path, bool]


@dataclass
class WalkStats:
    """Counters describing one walk"""
    directories_visited: int = 0
    directories_skipped: int = 0
    rule_files_loaded: int = 0
    rule_files_skipped: int = 0
    files_seen: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class WalkResult:
    """Outcome of TreeWalker.walk()"""
    root: Path
    walk: WalkStats
    sync: SyncStats
    elapsed: float = 0.0

    @property
    def had_errors(self) -> bool:
        return bool(
            self.walk.directories_skipped
            or self.walk.rule_files_skipped
            or self.sync.errors
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            'root': str(self.root),
            'elapsed': round(self.elapsed, 3),
            **self.walk.to_dict(),
            **self.sync.to_dict(),
        }


class TreeWalker:
    """
    Walks a directory tree and reconciles every file's ignored marker
    """

    def __init__(self,
                 synchronizer: Optional[AttributeSynchronizer] = None,
                 ignore_filename: str = IGNORE_FILENAME,
                 matcher: Optional[PatternMatcher] = None,
                 follow_symlinks: bool = False,
                 default_patterns: Optional[List[str]] = None,
                 cancel_event: Optional[threading.Event] = None):
        """
        Initialize the walker

        Args:
            synchronizer: Receives each verdict during walk()
            ignore_filename: Name of per-directory rule files
            matcher: Pattern matcher used to compile rule files
            follow_symlinks: Descend into symlinked directories and
                reconcile symlinked files whose target lies outside root
            default_patterns: Patterns applied as an extra root scope
            cancel_event: When set, the walk stops at the next directory
        """
        self.synchronizer = synchronizer
        self.ignore_filename = ignore_filename
        self.matcher = matcher or get_default_matcher()
        self.loader = IgnoreFileLoader(ignore_filename, self.matcher)
        self.follow_symlinks = follow_symlinks
        self.default_patterns = list(default_patterns or [])
        self.cancel_event = cancel_event

        self.stats = WalkStats()
        self._root_real = ""
        self._active: Set[str] = set()

    @classmethod
    def from_config(cls, config: DropIgnoreConfig,
                    synchronizer: Optional[AttributeSynchronizer] = None,
                    cancel_event: Optional[threading.Event] = None) -> 'TreeWalker':
        return cls(
            synchronizer=synchronizer,
            ignore_filename=config.ignore_filename,
            follow_symlinks=config.follow_symlinks,
            default_patterns=config.default_patterns,
            cancel_event=cancel_event,
        )

    def walk(self, root: Union[str, Path]) -> WalkResult:
        """
        Walk the tree and push every verdict to the synchronizer

        Args:
            root: Directory to start from

        Returns:
            WalkResult with counters and elapsed time

        Raises:
            DirectoryEnumerationError: If the root itself cannot be listed
            WalkCancelled: If cancellation was requested
        """
        if self.synchronizer is None:
            raise ValueError("TreeWalker.walk() needs a synchronizer; use verdicts() to only compute")

        root = Path(root).absolute()
        logger.info(f"Scanning {root} for {self.ignore_filename} files")
        started = time.monotonic()

        try:
            for file_path, ignored in self.verdicts(root):
                self.synchronizer.reconcile(file_path, ignored)
        finally:
            self.synchronizer.flush()

        result = WalkResult(
            root=root,
            walk=self.stats,
            sync=self.synchronizer.stats,
            elapsed=time.monotonic() - started,
        )
        logger.info(
            f"Done in {result.elapsed:.2f}s: {self.stats.directories_visited} directories, "
            f"{result.sync.ignored} ignored, {result.sync.cleared} cleared, "
            f"{result.sync.errors} errors"
        )
        return result

    def verdicts(self, root: Union[str, Path]) -> Iterator[Verdict]:
        """
        Yield (file, ignored) for every file below root without side effects

        Files of a directory are yielded after all of its subdirectories.

        Args:
            root: Directory to start from

        Raises:
            DirectoryEnumerationError: If the root itself cannot be listed
            WalkCancelled: If cancellation was requested
        """
        root = Path(root).absolute()
        if not root.is_dir():
            raise DirectoryEnumerationError(root, "not a directory")

        self.stats = WalkStats()
        self._root_real = os.path.realpath(root)
        self._active = set()

        scopes = ScopeStack()
        if self.default_patterns:
            scopes = scopes.push(RuleSet.from_patterns(root, self.default_patterns, self.matcher))

        yield from self._visit(root, scopes)

    def _visit(self, directory: Path, scopes: ScopeStack) -> Iterator[Verdict]:
        # Entering
        self._check_cancelled(directory)

        # Only directories on the current recursion path form a cycle
        real_path = os.path.realpath(directory)
        if real_path in self._active:
            logger.warning(f"Skipping {directory}: symlink cycle back to {real_path}")
            self.stats.directories_skipped += 1
            return

        self._active.add(real_path)
        try:
            logger.debug(f"Processing {directory}")
            self.stats.directories_visited += 1

            # ScopeLoaded
            scopes = scopes.push(self._load_rule_set(directory))
            logger.trace(f"{directory}: {scopes!r}")

            subdirs, files = self._scan(directory)

            # ChildrenProcessed
            for subdir in subdirs:
                try:
                    yield from self._visit(subdir, scopes)
                except DirectoryEnumerationError as e:
                    self.stats.directories_skipped += 1
                    logger.warning(f"Skipping {subdir}: {e.reason}")

            # FilesReconciled
            for file_path in files:
                self.stats.files_seen += 1
                yield file_path, scopes.is_ignored(file_path)
        finally:
            self._active.discard(real_path)

    def _inside_root(self, path: Path) -> bool:
        """True if path resolves to somewhere below the walk root"""
        real_path = os.path.realpath(path)
        try:
            return os.path.commonpath([real_path, self._root_real]) == self._root_real
        except ValueError:
            # Different drives on Windows
            return False

    def _check_cancelled(self, directory: Path):
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise WalkCancelled(directory)

    def _load_rule_set(self, directory: Path) -> Optional[RuleSet]:
        """
        Load the directory's rule file, if it has one

        Args:
            directory: Directory being entered

        Returns:
            RuleSet or None when there is no usable rule file
        """
        rule_file = self.loader.rule_file_for(directory)
        if not os.path.exists(rule_file):
            return None

        logger.info(f"{self.ignore_filename} found at {rule_file}")
        try:
            rule_set = RuleSet.load(rule_file, self.matcher, self.loader)
        except RuleFileUnreadable as e:
            self.stats.rule_files_skipped += 1
            logger.warning(f"{e}; no rules applied from {directory}")
            return None
        except PatternSyntaxError as e:
            self.stats.rule_files_skipped += 1
            logger.error(f"{e}; fix the rule file, no rules applied from {directory}")
            return None

        self.stats.rule_files_loaded += 1
        return rule_set

    def _scan(self, directory: Path) -> Tuple[List[Path], List[Path]]:
        """
        List direct subdirectories and files, sorted by name

        Args:
            directory: Directory to list

        Returns:
            Tuple of (subdirectories, files)

        Raises:
            DirectoryEnumerationError: If the directory cannot be listed
        """
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            raise DirectoryEnumerationError(directory, e.strerror or str(e)) from e

        subdirs: List[Path] = []
        files: List[Path] = []

        for entry in entries:
            path = directory / entry.name
            try:
                is_link = entry.is_symlink()
                if is_link and not self.follow_symlinks:
                    logger.debug(f"Skipping symlink {path}")
                    continue
                # The real path gets its verdict under its own ancestors' rules
                if is_link and self._inside_root(path):
                    logger.debug(f"Skipping symlink {path}: target is inside the walk root")
                    continue
                if entry.is_dir():
                    subdirs.append(path)
                elif entry.is_file():
                    files.append(path)
                else:
                    logger.debug(f"Skipping special file {path}")
            except OSError as e:
                logger.warning(f"Cannot stat {path}: {e}")

        return subdirs, files
