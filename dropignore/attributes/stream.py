"""
NTFS alternate data stream backend (Windows)

Dropbox on Windows reads the com.dropbox.ignored stream of a file; a
stream containing 1 marks the file as ignored.
"""

import os

from .base import AttributeService, PathLike
from ..errors import AttrError, DropIgnoreError
from ..ignore.constants import ATTRIBUTE_NAME, ATTRIBUTE_VALUE
from ..utils import get_logger

logger = get_logger(__name__)


class StreamAttributeService(AttributeService):
    """Stores the ignored marker in an alternate data stream"""

    name = "stream"

    def __init__(self, stream_name: str = ATTRIBUTE_NAME, value: bytes = ATTRIBUTE_VALUE,
                 check_platform: bool = True):
        """
        Args:
            stream_name: Name of the alternate data stream
            value: Content written to the stream when ignoring
            check_platform: Refuse to run outside Windows, where "file:stream"
                would name a regular sibling file instead of a stream
        """
        if check_platform and os.name != 'nt':
            raise DropIgnoreError("Alternate data streams are only available on Windows")
        self.stream_name = stream_name
        self.value = value

    def stream_path(self, path: PathLike) -> str:
        return f"{os.fspath(path)}:{self.stream_name}"

    def set_ignored(self, path: PathLike) -> None:
        if not os.path.isfile(path):
            raise AttrError(path, "set", "no such file")
        try:
            with open(self.stream_path(path), 'wb') as f:
                f.write(self.value)
        except OSError as e:
            raise AttrError(path, "set", e.strerror or str(e)) from e
        logger.debug(f"Set stream {self.stream_path(path)}")

    def clear_ignored(self, path: PathLike) -> None:
        if not os.path.isfile(path):
            raise AttrError(path, "clear", "no such file")
        try:
            os.remove(self.stream_path(path))
        except FileNotFoundError:
            return
        except OSError as e:
            raise AttrError(path, "clear", e.strerror or str(e)) from e
        logger.debug(f"Removed stream {self.stream_path(path)}")

    def is_ignored(self, path: PathLike) -> bool:
        try:
            with open(self.stream_path(path), 'rb') as f:
                return f.read().strip() == self.value
        except FileNotFoundError:
            return False
        except OSError as e:
            raise AttrError(path, "read", e.strerror or str(e)) from e

    def __repr__(self) -> str:
        return f"StreamAttributeService({self.stream_name!r})"
