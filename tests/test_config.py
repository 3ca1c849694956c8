#!/usr/bin/env python3
"""
Tests for configuration loading
"""

import os

import pytest

from dropignore.config import DropIgnoreConfig
from dropignore.errors import DropIgnoreError
from dropignore.ignore.constants import ATTRIBUTE_NAME, IGNORE_FILENAME


def test_defaults():
    config = DropIgnoreConfig()

    assert config.ignore_filename == IGNORE_FILENAME
    assert config.attribute_name == ATTRIBUTE_NAME
    assert config.service == "auto"
    assert config.follow_symlinks is False
    assert config.dry_run is False
    assert config.default_patterns == []


def test_from_env():
    env = {
        'DROPIGNORE_FILENAME': '.syncignore',
        'DROPIGNORE_SERVICE': 'Sidecar',
        'DROPIGNORE_FOLLOW_SYMLINKS': 'yes',
        'DROPIGNORE_DRY_RUN': '1',
        'DROPIGNORE_PATTERNS': os.pathsep.join(['*.iso', 'cache/']),
    }

    config = DropIgnoreConfig.from_env(env)

    assert config.ignore_filename == '.syncignore'
    assert config.service == 'sidecar'
    assert config.follow_symlinks is True
    assert config.dry_run is True
    assert config.default_patterns == ['*.iso', 'cache/']


def test_from_env_with_bad_flag_keeps_default(caplog):
    config = DropIgnoreConfig.from_env({'DROPIGNORE_FOLLOW_SYMLINKS': 'maybe'})

    assert config.follow_symlinks is False
    assert "DROPIGNORE_FOLLOW_SYMLINKS" in caplog.text


def test_empty_env_gives_defaults():
    assert DropIgnoreConfig.from_env({}) == DropIgnoreConfig()


def test_overrides_skip_none():
    config = DropIgnoreConfig(service='sidecar')

    updated = config.with_overrides(service=None, dry_run=True)

    assert updated.service == 'sidecar'
    assert updated.dry_run is True
    assert config.dry_run is False


@pytest.mark.parametrize("kwargs", [
    {'service': 'floppy'},
    {'ignore_filename': ''},
    {'ignore_filename': 'sub/.dropIgnore'},
    {'attribute_name': ''},
])
def test_invalid_values_raise(kwargs):
    with pytest.raises(DropIgnoreError):
        DropIgnoreConfig(**kwargs)


def test_blank_patterns_are_dropped():
    config = DropIgnoreConfig(default_patterns=[' *.iso ', '', '   '])

    assert config.default_patterns == ['*.iso']
