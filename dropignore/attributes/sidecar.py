"""
Sidecar backend: ignored markers kept in a JSON file at the tree root

Useful on filesystems without extended attributes, and as a record of
what a run decided. Changes are buffered until flush().
"""

import json
import os
from pathlib import Path
from typing import Dict, Optional

from .base import AttributeService, PathLike
from ..errors import AttrError, DropIgnoreError
from ..ignore.constants import SIDECAR_FILENAME
from ..utils import get_logger

logger = get_logger(__name__)


class SidecarAttributeService(AttributeService):
    """Tracks ignored files in <root>/.dropignore-state.json"""

    name = "sidecar"

    def __init__(self, root: PathLike, filename: str = SIDECAR_FILENAME):
        self.root = Path(root).absolute()
        self.state_path = self.root / filename
        self._state: Optional[Dict[str, bool]] = None
        self._dirty = False

    def _load(self) -> Dict[str, bool]:
        if self._state is not None:
            return self._state

        if not self.state_path.exists():
            self._state = {}
            return self._state

        try:
            with open(self.state_path, 'r', encoding='utf-8') as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DropIgnoreError(f"Cannot read sidecar state {self.state_path}: {e}") from e

        ignored = payload.get('ignored', []) if isinstance(payload, dict) else []
        self._state = {}
        for key in map(str, ignored):
            if os.path.lexists(self.root / key):
                self._state[key] = True
            else:
                # Deleted since the last run
                logger.debug(f"Dropping stale entry {key}")
                self._dirty = True

        logger.debug(f"Loaded {len(self._state)} entries from {self.state_path}")
        return self._state

    def _key(self, path: PathLike, operation: str) -> str:
        path = Path(path).absolute()
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            raise AttrError(path, operation, f"outside sidecar root {self.root}")

    def set_ignored(self, path: PathLike) -> None:
        key = self._key(path, "set")
        if not os.path.lexists(path):
            raise AttrError(path, "set", "no such file")
        state = self._load()
        if key not in state:
            state[key] = True
            self._dirty = True

    def clear_ignored(self, path: PathLike) -> None:
        key = self._key(path, "clear")
        if not os.path.lexists(path):
            raise AttrError(path, "clear", "no such file")
        state = self._load()
        if state.pop(key, None) is not None:
            self._dirty = True

    def is_ignored(self, path: PathLike) -> bool:
        return self._key(path, "read") in self._load()

    def flush(self) -> None:
        if not self._dirty:
            return

        payload = {'ignored': sorted(self._load())}
        tmp_path = self.state_path.with_name(self.state_path.name + '.tmp')
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)
                f.write('\n')
            os.replace(tmp_path, self.state_path)
        except OSError as e:
            raise DropIgnoreError(f"Cannot write sidecar state {self.state_path}: {e}") from e

        self._dirty = False
        logger.info(f"Wrote {len(payload['ignored'])} ignored entries to {self.state_path}")

    def __repr__(self) -> str:
        return f"SidecarAttributeService({str(self.state_path)!r})"
