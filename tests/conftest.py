import sys
from pathlib import Path
from typing import Dict, Union

import pytest

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dropignore.attributes import MemoryAttributeService
from dropignore.sync import AttributeSynchronizer
from dropignore.walker import TreeWalker

TreeSpec = Dict[str, Union[str, bytes, dict]]


def build_tree(root: Path, spec: TreeSpec) -> Path:
    """
    Create files and directories from a nested dict

    Strings and bytes become file contents, dicts become directories.
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, content in spec.items():
        path = root / name
        if isinstance(content, dict):
            build_tree(path, content)
        elif isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding='utf-8')
    return root


@pytest.fixture
def make_tree(tmp_path):
    def _make(spec: TreeSpec, name: str = "tree") -> Path:
        return build_tree(tmp_path / name, spec)

    return _make


@pytest.fixture
def memory_service():
    return MemoryAttributeService()


@pytest.fixture
def run_walk(memory_service):
    """Walk a tree against the in-memory service and return {relative path: ignored}"""
    def _run(root: Path, **walker_kwargs) -> Dict[str, bool]:
        synchronizer = AttributeSynchronizer(memory_service)
        walker = TreeWalker(synchronizer, **walker_kwargs)
        walker.walk(root)
        verdicts = {}
        for command, path in memory_service.commands:
            verdicts[path.relative_to(root).as_posix()] = command == "set"
        return verdicts

    return _run
