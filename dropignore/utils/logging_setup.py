"""
Logging configuration for dropignore.

Provides environment-aware logging that:
- Writes human-readable records to stderr by default
- Outputs JSON lines when DROPIGNORE_LOG_FORMAT=json
- Optionally mirrors records into a rotating log file
- Includes custom TRACE level for per-pattern debugging
"""

import sys
import logging
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional, Any

# Define TRACE level (lower number = more detailed)
TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

HUMAN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'


def trace(self, message, *args, **kwargs):
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, message, args, **kwargs)


logging.Logger.trace = trace


def add_trace_to_logger():
    """Ensure trace method is available on all logger instances"""
    if not hasattr(logging.Logger, 'trace'):
        logging.Logger.trace = trace


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for log shippers and CI output"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'component': record.name,
            'message': record.getMessage(),
            'pid': os.getpid(),
        }

        # Fields passed through log_with_context
        if hasattr(record, 'extra'):
            log_data.update(record.extra)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def resolve_level(level_str: Optional[str]) -> int:
    """
    Convert a level name to a numeric level, handling the custom TRACE level

    Args:
        level_str: Level name such as 'debug' or 'TRACE'

    Returns:
        Numeric logging level (INFO for unknown names)
    """
    if not level_str:
        return logging.INFO
    if level_str.upper() == 'TRACE':
        return TRACE_LEVEL
    level = getattr(logging, level_str.upper(), logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    json_output: Optional[bool] = None,
    enable_rotation: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure logging based on environment.

    Args:
        log_level: Override log level (defaults to DROPIGNORE_LOG_LEVEL,
            then LOG_LEVEL, then INFO)
        log_file: Optional path to an additional log file
        json_output: Emit JSON records (defaults to DROPIGNORE_LOG_FORMAT=json)
        enable_rotation: Enable log rotation for file handler
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
    """
    add_trace_to_logger()
    # DROPIGNORE_LOG_LEVEL takes precedence over LOG_LEVEL
    level_str = log_level or os.environ.get('DROPIGNORE_LOG_LEVEL') or os.environ.get('LOG_LEVEL', 'INFO')
    level = resolve_level(level_str)

    if json_output is None:
        json_output = os.environ.get('DROPIGNORE_LOG_FORMAT', '').lower() == 'json'

    # Clear any existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    if json_output:
        console_handler.setFormatter(JsonFormatter())
    elif level <= logging.DEBUG:
        console_handler.setFormatter(logging.Formatter(HUMAN_FORMAT))
    else:
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        if enable_rotation:
            file_handler = RotatingFileHandler(
                str(log_path),
                maxBytes=max_bytes,
                backupCount=backup_count
            )
        else:
            file_handler = logging.FileHandler(str(log_path))

        file_handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(HUMAN_FORMAT))
        root_logger.addHandler(file_handler)

    root_logger.setLevel(level)

    logger = logging.getLogger('dropignore')
    logger.debug(f"Logging configured - Level: {level_str.upper()}, JSON: {json_output}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    add_trace_to_logger()
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any
) -> None:
    """
    Log a message with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (e.g., logging.INFO)
        message: Log message
        **context: Additional fields to include in structured logs
    """
    extra = {'extra': context} if context else {}
    logger.log(level, message, extra=extra)
