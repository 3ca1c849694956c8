#!/usr/bin/env python3
"""
Tests for logging configuration
"""

import json
import logging

import pytest

from dropignore.utils import logging_setup
from dropignore.utils.logging_setup import (
    TRACE_LEVEL,
    JsonFormatter,
    configure_logging,
    get_logger,
    resolve_level,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


@pytest.mark.parametrize("name,expected", [
    ("trace", TRACE_LEVEL),
    ("DEBUG", logging.DEBUG),
    ("warning", logging.WARNING),
    ("nonsense", logging.INFO),
    (None, logging.INFO),
])
def test_resolve_level(name, expected):
    assert resolve_level(name) == expected


def test_loggers_have_trace():
    logger = get_logger("dropignore.test")

    assert hasattr(logger, "trace")


def test_json_formatter_includes_context():
    record = logging.LogRecord(
        "dropignore.sync", logging.WARNING, __file__, 1, "Skipping %s", ("x.txt",), None
    )
    record.extra = {'path': 'x.txt', 'operation': 'set'}

    payload = json.loads(JsonFormatter().format(record))

    assert payload['level'] == 'WARNING'
    assert payload['message'] == 'Skipping x.txt'
    assert payload['path'] == 'x.txt'
    assert payload['operation'] == 'set'


def test_env_level_and_file_handler(tmp_path, monkeypatch, restore_root_logger):
    monkeypatch.setenv('DROPIGNORE_LOG_LEVEL', 'debug')
    log_file = tmp_path / "logs" / "dropignore.log"

    configure_logging(log_file=str(log_file))
    get_logger("dropignore.test").debug("hello from test")
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 2
    assert "hello from test" in log_file.read_text(encoding='utf-8')


def test_json_output_from_env(monkeypatch, restore_root_logger):
    monkeypatch.setenv('DROPIGNORE_LOG_FORMAT', 'json')

    configure_logging(log_level='info')

    handler = restore_root_logger.handlers[0]
    assert isinstance(handler.formatter, logging_setup.JsonFormatter)
