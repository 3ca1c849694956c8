"""
Push computed verdicts into the attribute service
"""

import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Iterable, Union

from .attributes import AttributeService
from .errors import AttrError
from .utils import get_logger, log_with_context

logger = get_logger(__name__)


@dataclass
class SyncStats:
    """Counters for one synchronization run"""
    ignored: int = 0
    cleared: int = 0
    errors: int = 0

    @property
    def total(self) -> int:
        return self.ignored + self.cleared + self.errors

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class AttributeSynchronizer:
    """
    Issues one set or clear command per file

    Commands are unconditional. The service is responsible for making a
    repeated set or clear a no-op, so two runs over an unchanged tree end
    in the same state as one.
    """

    def __init__(self, service: AttributeService, dry_run: bool = False):
        """
        Args:
            service: Backend that persists the marker
            dry_run: Log the commands without calling the service
        """
        self.service = service
        self.dry_run = dry_run
        self.stats = SyncStats()

    def reconcile(self, file_path: Union[str, Path], ignored: bool) -> bool:
        """
        Bring a file's marker in line with its verdict

        Args:
            file_path: File to update
            ignored: Verdict computed from the active scopes

        Returns:
            True if the command succeeded (or would be issued in a dry run)
        """
        operation = "set" if ignored else "clear"

        if self.dry_run:
            logger.info(f"[dry-run] {operation} {file_path}")
        else:
            try:
                if ignored:
                    self.service.set_ignored(file_path)
                else:
                    self.service.clear_ignored(file_path)
            except AttrError as e:
                self.stats.errors += 1
                log_with_context(
                    logger, logging.WARNING, f"Skipping {file_path}: {e.reason}",
                    path=str(file_path), operation=operation,
                )
                return False
            logger.debug(f"{operation} {file_path}")

        if ignored:
            self.stats.ignored += 1
        else:
            self.stats.cleared += 1
        return True

    def reconcile_all(self, verdicts: Iterable) -> SyncStats:
        """Reconcile (path, ignored) pairs in any order"""
        for file_path, ignored in verdicts:
            self.reconcile(file_path, ignored)
        return self.stats

    def ignore_files(self, paths: Iterable[Union[str, Path]]) -> SyncStats:
        """
        Mark explicitly listed files as ignored, bypassing rule files

        Args:
            paths: Files to mark

        Returns:
            Counters for this synchronizer
        """
        for path in paths:
            path = Path(path)
            if not path.is_file():
                self.stats.errors += 1
                logger.warning(f"Skipping {path}: not a file")
                continue
            self.reconcile(path, True)
        return self.stats

    def flush(self) -> None:
        if not self.dry_run:
            self.service.flush()
