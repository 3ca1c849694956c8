"""
Runtime configuration for dropignore

Values come from defaults, then DROPIGNORE_* environment variables, then
command-line flags.
"""

import os
from dataclasses import dataclass, field, replace
from typing import List, Mapping, Optional

from .errors import DropIgnoreError
from .ignore.constants import (
    ATTRIBUTE_NAME,
    IGNORE_FILENAME,
    SERVICE_AUTO,
    SERVICE_CHOICES,
    SIDECAR_FILENAME,
)
from .utils import get_logger

logger = get_logger(__name__)

_TRUE_VALUES = ('true', '1', 'yes', 'on')
_FALSE_VALUES = ('false', '0', 'no', 'off', '')


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning(f"Ignoring {name}={value!r}: expected a boolean")
    return default


@dataclass
class DropIgnoreConfig:
    """Settings shared by the walker, the synchronizer and the CLI"""
    ignore_filename: str = IGNORE_FILENAME
    attribute_name: str = ATTRIBUTE_NAME
    service: str = SERVICE_AUTO
    sidecar_filename: str = SIDECAR_FILENAME
    follow_symlinks: bool = False
    dry_run: bool = False
    default_patterns: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate configuration values"""
        if not self.ignore_filename or '/' in self.ignore_filename or '\\' in self.ignore_filename:
            raise DropIgnoreError(f"Invalid rule file name: {self.ignore_filename!r}")
        if not self.attribute_name:
            raise DropIgnoreError("Attribute name must not be empty")
        if self.service not in SERVICE_CHOICES:
            raise DropIgnoreError(
                f"Unknown attribute service {self.service!r} "
                f"(choose from {', '.join(SERVICE_CHOICES)})"
            )
        self.default_patterns = [p.strip() for p in self.default_patterns if p.strip()]

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'DropIgnoreConfig':
        """
        Build configuration from DROPIGNORE_* environment variables

        Args:
            env: Mapping to read instead of os.environ

        Returns:
            DropIgnoreConfig with environment overrides applied
        """
        env = os.environ if env is None else env
        defaults = cls()
        patterns = env.get('DROPIGNORE_PATTERNS', '')
        return cls(
            ignore_filename=env.get('DROPIGNORE_FILENAME') or defaults.ignore_filename,
            attribute_name=env.get('DROPIGNORE_ATTRIBUTE') or defaults.attribute_name,
            service=(env.get('DROPIGNORE_SERVICE') or defaults.service).lower(),
            sidecar_filename=env.get('DROPIGNORE_SIDECAR') or defaults.sidecar_filename,
            follow_symlinks=_env_flag(env, 'DROPIGNORE_FOLLOW_SYMLINKS', defaults.follow_symlinks),
            dry_run=_env_flag(env, 'DROPIGNORE_DRY_RUN', defaults.dry_run),
            default_patterns=[p for p in patterns.split(os.pathsep) if p],
        )

    def with_overrides(self, **overrides) -> 'DropIgnoreConfig':
        """Copy with non-None overrides applied (command-line flags)"""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)
