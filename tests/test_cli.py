#!/usr/bin/env python3
"""
Tests for the dropignore command line
"""

import json

import pytest

from dropignore import cli
from dropignore.cli import DropIgnoreCLI
from dropignore.ignore import IGNORE_FILENAME
from dropignore.ignore.constants import SIDECAR_FILENAME


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch):
    """Keep the CLI from reconfiguring the root logger and from reading the caller's env"""
    monkeypatch.setattr(cli, 'configure_logging', lambda **kwargs: None)
    for name in ['DROPIGNORE_FILENAME', 'DROPIGNORE_SERVICE', 'DROPIGNORE_PATTERNS',
                 'DROPIGNORE_DRY_RUN', 'DROPIGNORE_FOLLOW_SYMLINKS', 'DROPIGNORE_ATTRIBUTE',
                 'DROPIGNORE_SIDECAR']:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project(make_tree):
    return make_tree({
        IGNORE_FILENAME: "*.tmp\n",
        "a": {"x.tmp": "", "y.txt": ""},
    })


def sidecar_entries(root):
    payload = json.loads((root / SIDECAR_FILENAME).read_text(encoding='utf-8'))
    return payload['ignored']


def run(*argv):
    return DropIgnoreCLI(list(argv)).run()


def test_scan_with_sidecar(project):
    assert run('scan', str(project), '--service', 'sidecar') == 0

    assert sidecar_entries(project) == ["a/x.tmp"]


def test_scan_json_summary(project, capsys):
    assert run('scan', str(project), '--service', 'memory', '--json') == 0

    summary = json.loads(capsys.readouterr().out)
    assert summary['root'] == str(project)
    assert summary['ignored'] == 1
    assert summary['cleared'] == 2
    assert summary['directories_visited'] == 2
    assert summary['rule_files_loaded'] == 1
    assert summary['errors'] == 0


def test_options_before_subcommand(project):
    assert run('--service', 'sidecar', 'scan', str(project)) == 0

    assert sidecar_entries(project) == ["a/x.tmp"]


def test_scan_defaults_to_current_directory(project, monkeypatch):
    monkeypatch.chdir(project)

    assert run('--service', 'sidecar') == 0

    assert sidecar_entries(project) == ["a/x.tmp"]


def test_scan_pattern_option(project):
    assert run('scan', str(project), '--service', 'sidecar', '--pattern', '*.txt') == 0

    assert sidecar_entries(project) == ["a/x.tmp", "a/y.txt"]


def test_dry_run_writes_nothing(project):
    assert run('scan', str(project), '--service', 'sidecar', '--dry-run') == 0

    assert not (project / SIDECAR_FILENAME).exists()


def test_scan_missing_root_fails(tmp_path):
    assert run('scan', str(tmp_path / 'missing'), '--service', 'memory') == 1


def test_ignore_files(project, monkeypatch):
    monkeypatch.chdir(project)

    assert run('-f', 'a/y.txt', '--service', 'sidecar') == 0

    assert sidecar_entries(project) == ["a/y.txt"]


def test_ignore_subcommand_reports_missing_file(project, monkeypatch):
    monkeypatch.chdir(project)

    assert run('ignore', 'a/y.txt', 'nope.txt', '--service', 'sidecar') == 1

    assert sidecar_entries(project) == ["a/y.txt"]


def test_status_json(project, capsys):
    assert run('status', str(project), '--json', '--service', 'sidecar') == 0

    payload = json.loads(capsys.readouterr().out)
    rows = {row['path']: row for row in payload['files']}
    assert rows['a/x.tmp'] == {'path': 'a/x.tmp', 'ignored': True, 'marked': False}
    assert rows['a/y.txt']['ignored'] is False
    assert not (project / SIDECAR_FILENAME).exists()


def test_status_changed_after_scan(project, capsys):
    run('scan', str(project), '--service', 'sidecar')
    (project / "a" / "new.tmp").write_text("", encoding='utf-8')

    assert run('status', str(project), '--changed', '--service', 'sidecar') == 0

    out = capsys.readouterr().out.splitlines()
    assert out == ["ignored  a/new.tmp  (out of date)"]


def test_init_creates_rule_file(tmp_path, capsys):
    assert run('init', str(tmp_path), '--minimal', '--add', '*.iso') == 0
    assert "*.iso" in (tmp_path / IGNORE_FILENAME).read_text(encoding='utf-8').splitlines()

    assert run('init', str(tmp_path)) == 1
    assert "already exists" in capsys.readouterr().out


def test_custom_ignore_file_name(make_tree):
    root = make_tree({".syncignore": "*.bin\n", "a.bin": "", IGNORE_FILENAME: "*.txt\n", "b.txt": ""})

    assert run('scan', str(root), '--service', 'sidecar', '--ignore-file', '.syncignore') == 0

    assert sidecar_entries(root) == ["a.bin"]


def test_invalid_config_fails(project):
    assert run('scan', str(project), '--ignore-file', 'a/b') == 1


def test_bad_arguments_exit_with_usage_error(capsys):
    with pytest.raises(SystemExit) as exc_info:
        run('scan', '--service', 'floppy')

    assert exc_info.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_main_exits_with_status(project):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(['scan', str(project), '--service', 'memory'])

    assert exc_info.value.code == 0
