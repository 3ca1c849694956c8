"""
Attribute services that persist the ignored marker on files
"""

import os
from pathlib import Path
from typing import Union

from .base import AttributeService
from .memory import MemoryAttributeService
from .sidecar import SidecarAttributeService
from .stream import StreamAttributeService
from .xattr import XattrAttributeService, xattr_supported
from ..errors import DropIgnoreError
from ..ignore.constants import (
    ATTRIBUTE_NAME,
    SERVICE_AUTO,
    SERVICE_MEMORY,
    SERVICE_SIDECAR,
    SERVICE_STREAM,
    SERVICE_XATTR,
    SIDECAR_FILENAME,
)

__all__ = [
    'AttributeService',
    'MemoryAttributeService',
    'SidecarAttributeService',
    'StreamAttributeService',
    'XattrAttributeService',
    'create_attribute_service',
]


def create_attribute_service(name: str = SERVICE_AUTO,
                             root: Union[str, Path] = '.',
                             attribute_name: str = ATTRIBUTE_NAME,
                             sidecar_filename: str = SIDECAR_FILENAME) -> AttributeService:
    """
    Build the attribute service selected by configuration

    Args:
        name: One of auto, xattr, stream, sidecar, memory
        root: Tree root (used by the sidecar store)
        attribute_name: Attribute or stream name carrying the marker
        sidecar_filename: File name of the sidecar store

    Returns:
        AttributeService instance

    Raises:
        DropIgnoreError: If the service is unknown or unsupported here
    """
    if name == SERVICE_AUTO:
        if os.name == 'nt':
            name = SERVICE_STREAM
        elif xattr_supported():
            name = SERVICE_XATTR
        else:
            name = SERVICE_SIDECAR

    if name == SERVICE_XATTR:
        return XattrAttributeService(attribute_name)
    if name == SERVICE_STREAM:
        return StreamAttributeService(attribute_name)
    if name == SERVICE_SIDECAR:
        return SidecarAttributeService(root, sidecar_filename)
    if name == SERVICE_MEMORY:
        return MemoryAttributeService()

    raise DropIgnoreError(f"Unknown attribute service: {name}")
