"""
In-memory backend for dry runs and tests
"""

import os
from pathlib import Path
from typing import Dict, List, Tuple

from .base import AttributeService, PathLike
from ..errors import AttrError


class MemoryAttributeService(AttributeService):
    """Keeps markers in a dict and records every command it receives"""

    name = "memory"

    def __init__(self):
        self.flags: Dict[Path, bool] = {}
        self.commands: List[Tuple[str, Path]] = []

    def _check(self, path: PathLike, operation: str) -> Path:
        path = Path(path)
        if not os.path.lexists(path):
            raise AttrError(path, operation, "no such file")
        return path

    def set_ignored(self, path: PathLike) -> None:
        path = self._check(path, "set")
        self.commands.append(("set", path))
        self.flags[path] = True

    def clear_ignored(self, path: PathLike) -> None:
        path = self._check(path, "clear")
        self.commands.append(("clear", path))
        self.flags.pop(path, None)

    def is_ignored(self, path: PathLike) -> bool:
        return self.flags.get(Path(path), False)

    def ignored_paths(self) -> List[Path]:
        return sorted(self.flags)
