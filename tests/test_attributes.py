#!/usr/bin/env python3
"""
Tests for the attribute service backends
"""

import json
import os
import uuid

import pytest

from dropignore.attributes import (
    MemoryAttributeService,
    SidecarAttributeService,
    StreamAttributeService,
    XattrAttributeService,
    create_attribute_service,
)
from dropignore.attributes.xattr import platform_attribute_name, xattr_supported
from dropignore.errors import AttrError, DropIgnoreError
from dropignore.ignore.constants import ATTRIBUTE_NAME, SIDECAR_FILENAME


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "file.txt"
    path.write_text("data", encoding='utf-8')
    return path


def _user_xattrs_work(path) -> bool:
    if not xattr_supported():
        return False
    probe = platform_attribute_name(f"dropignore.probe.{uuid.uuid4().hex}")
    try:
        os.setxattr(path, probe, b"1")
        os.removexattr(path, probe)
    except OSError:
        return False
    return True


@pytest.fixture
def xattr_file(sample_file):
    if not _user_xattrs_work(sample_file):
        pytest.skip("user extended attributes not available here")
    return sample_file


class TestMemoryService:

    def test_set_and_clear(self, sample_file):
        service = MemoryAttributeService()

        service.set_ignored(sample_file)
        assert service.is_ignored(sample_file)

        service.clear_ignored(sample_file)
        assert not service.is_ignored(sample_file)
        assert service.commands == [("set", sample_file), ("clear", sample_file)]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(AttrError):
            MemoryAttributeService().set_ignored(tmp_path / "missing")


class TestSidecarService:

    def test_flush_writes_relative_paths(self, tmp_path, sample_file):
        service = SidecarAttributeService(tmp_path)

        service.set_ignored(sample_file)
        service.flush()

        payload = json.loads((tmp_path / SIDECAR_FILENAME).read_text(encoding='utf-8'))
        assert payload == {'ignored': ["file.txt"]}

    def test_state_is_reloaded(self, tmp_path, sample_file):
        first = SidecarAttributeService(tmp_path)
        first.set_ignored(sample_file)
        first.flush()

        second = SidecarAttributeService(tmp_path)

        assert second.is_ignored(sample_file)

    def test_set_and_clear_are_idempotent(self, tmp_path, sample_file):
        service = SidecarAttributeService(tmp_path)

        service.clear_ignored(sample_file)
        service.set_ignored(sample_file)
        service.set_ignored(sample_file)
        service.flush()
        service.clear_ignored(sample_file)
        service.clear_ignored(sample_file)
        service.flush()

        payload = json.loads((tmp_path / SIDECAR_FILENAME).read_text(encoding='utf-8'))
        assert payload == {'ignored': []}

    def test_path_outside_root_raises(self, tmp_path):
        service = SidecarAttributeService(tmp_path / "root")

        with pytest.raises(AttrError):
            service.set_ignored(tmp_path / "elsewhere.txt")

    def test_corrupt_state_raises(self, tmp_path, sample_file):
        (tmp_path / SIDECAR_FILENAME).write_text("{not json", encoding='utf-8')

        with pytest.raises(DropIgnoreError):
            SidecarAttributeService(tmp_path).is_ignored(sample_file)

    def test_entries_for_deleted_files_are_dropped(self, tmp_path, sample_file):
        state = tmp_path / SIDECAR_FILENAME
        state.write_text(json.dumps({'ignored': ["file.txt", "gone/old.tmp"]}), encoding='utf-8')
        service = SidecarAttributeService(tmp_path)

        assert service.is_ignored(sample_file)
        assert not service.is_ignored(tmp_path / "gone" / "old.tmp")
        service.flush()

        assert json.loads(state.read_text(encoding='utf-8')) == {'ignored': ["file.txt"]}

    def test_no_write_without_changes(self, tmp_path):
        SidecarAttributeService(tmp_path).flush()

        assert not (tmp_path / SIDECAR_FILENAME).exists()


@pytest.mark.skipif(os.name == 'nt', reason="uses ':' in a regular file name")
class TestStreamService:
    """Outside Windows the stream is a sibling file named <file>:<stream>"""

    def test_refuses_non_windows_by_default(self):
        with pytest.raises(DropIgnoreError):
            StreamAttributeService()

    def test_set_clear_roundtrip(self, sample_file):
        service = StreamAttributeService(check_platform=False)
        stream = f"{sample_file}:{ATTRIBUTE_NAME}"

        service.set_ignored(sample_file)
        assert service.is_ignored(sample_file)
        with open(stream, 'rb') as f:
            assert f.read() == b"1"

        service.clear_ignored(sample_file)
        service.clear_ignored(sample_file)
        assert not service.is_ignored(sample_file)
        assert not os.path.exists(stream)

    def test_missing_file_raises(self, tmp_path):
        service = StreamAttributeService(check_platform=False)

        with pytest.raises(AttrError):
            service.set_ignored(tmp_path / "missing.txt")


class TestXattrService:

    def test_set_and_clear(self, xattr_file):
        service = XattrAttributeService()

        service.set_ignored(xattr_file)
        service.set_ignored(xattr_file)
        assert service.is_ignored(xattr_file)
        assert os.getxattr(xattr_file, service.attribute_name) == b"1"

        service.clear_ignored(xattr_file)
        service.clear_ignored(xattr_file)
        assert not service.is_ignored(xattr_file)

    def test_missing_file_raises(self, xattr_file):
        service = XattrAttributeService()

        with pytest.raises(AttrError) as exc_info:
            service.set_ignored(xattr_file.parent / "missing.txt")

        assert exc_info.value.operation == "set"


def test_linux_attribute_name_uses_user_namespace(monkeypatch):
    monkeypatch.setattr('sys.platform', 'linux')

    assert platform_attribute_name() == "user." + ATTRIBUTE_NAME
    assert platform_attribute_name("user.custom") == "user.custom"


def test_factory_builds_requested_service(tmp_path):
    assert isinstance(create_attribute_service("memory"), MemoryAttributeService)
    sidecar = create_attribute_service("sidecar", root=tmp_path, sidecar_filename="state.json")
    assert isinstance(sidecar, SidecarAttributeService)
    assert sidecar.state_path == tmp_path / "state.json"


@pytest.mark.skipif(os.name == 'nt', reason="auto picks the stream service on Windows")
def test_auto_falls_back_to_sidecar_without_xattr(tmp_path, monkeypatch):
    monkeypatch.setattr('dropignore.attributes.xattr_supported', lambda: False)

    service = create_attribute_service("auto", root=tmp_path)

    assert isinstance(service, SidecarAttributeService)


@pytest.mark.skipif(os.name == 'nt', reason="auto picks the stream service on Windows")
def test_auto_prefers_xattr_when_supported(monkeypatch):
    monkeypatch.setattr('dropignore.attributes.xattr_supported', lambda: True)
    monkeypatch.setattr('dropignore.attributes.xattr.xattr_supported', lambda: True)

    assert isinstance(create_attribute_service("auto"), XattrAttributeService)


def test_factory_rejects_unknown_service():
    with pytest.raises(DropIgnoreError):
        create_attribute_service("carrier-pigeon")
