"""
Interface for services that persist the ignored marker on a file
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


class AttributeService(ABC):
    """
    Sets and clears the out-of-band "ignored" marker on files

    set_ignored and clear_ignored must be idempotent: setting an already
    set marker or clearing an absent one is not an error. Failures are
    reported as AttrError.
    """

    name = "base"

    @abstractmethod
    def set_ignored(self, path: PathLike) -> None:
        """Mark a file as ignored"""
        raise NotImplementedError("Subclasses must implement set_ignored")

    @abstractmethod
    def clear_ignored(self, path: PathLike) -> None:
        """Remove the ignored marker from a file"""
        raise NotImplementedError("Subclasses must implement clear_ignored")

    @abstractmethod
    def is_ignored(self, path: PathLike) -> bool:
        """Current marker state, used for reporting only"""
        raise NotImplementedError("Subclasses must implement is_ignored")

    def flush(self) -> None:
        """Persist buffered changes. Services that write through do nothing."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
