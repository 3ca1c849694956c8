"""
Extended attribute backend (Linux)

The Dropbox client on Linux skips files carrying the
user.com.dropbox.ignored extended attribute.
"""

import errno
import os
import sys

from .base import AttributeService, PathLike
from ..errors import AttrError, DropIgnoreError
from ..ignore.constants import ATTRIBUTE_NAME, ATTRIBUTE_VALUE, XATTR_LINUX_PREFIX
from ..utils import get_logger

logger = get_logger(__name__)

# errno values meaning "attribute not present"
_MISSING_ATTRIBUTE_ERRNOS = {
    code for code in (getattr(errno, 'ENODATA', None), getattr(errno, 'ENOATTR', None))
    if code is not None
}


def xattr_supported() -> bool:
    """True if the os module exposes the extended attribute calls"""
    return all(hasattr(os, name) for name in ('setxattr', 'getxattr', 'removexattr'))


def platform_attribute_name(attribute_name: str = ATTRIBUTE_NAME) -> str:
    """Attribute name as the platform expects it"""
    if sys.platform.startswith('linux') and not attribute_name.startswith(XATTR_LINUX_PREFIX):
        return XATTR_LINUX_PREFIX + attribute_name
    return attribute_name


class XattrAttributeService(AttributeService):
    """Stores the ignored marker as an extended file attribute"""

    name = "xattr"

    def __init__(self, attribute_name: str = ATTRIBUTE_NAME, value: bytes = ATTRIBUTE_VALUE):
        if not xattr_supported():
            raise DropIgnoreError(
                f"Extended attributes are not supported on {sys.platform}"
            )
        self.attribute_name = platform_attribute_name(attribute_name)
        self.value = value

    def set_ignored(self, path: PathLike) -> None:
        try:
            os.setxattr(os.fspath(path), self.attribute_name, self.value)
        except OSError as e:
            raise AttrError(path, "set", e.strerror or str(e)) from e
        logger.debug(f"setxattr {self.attribute_name} {path}")

    def clear_ignored(self, path: PathLike) -> None:
        try:
            os.removexattr(os.fspath(path), self.attribute_name)
        except OSError as e:
            if e.errno in _MISSING_ATTRIBUTE_ERRNOS:
                return
            raise AttrError(path, "clear", e.strerror or str(e)) from e
        logger.debug(f"removexattr {self.attribute_name} {path}")

    def is_ignored(self, path: PathLike) -> bool:
        try:
            return os.getxattr(os.fspath(path), self.attribute_name) == self.value
        except OSError as e:
            if e.errno in _MISSING_ATTRIBUTE_ERRNOS:
                return False
            raise AttrError(path, "read", e.strerror or str(e)) from e

    def __repr__(self) -> str:
        return f"XattrAttributeService({self.attribute_name!r})"
