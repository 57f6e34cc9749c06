"""
Secure Logging Module
=====================

Provides logging that never leaks store passwords, keys or secret values.

Features:
- Automatic redaction of password/key/secret style fragments
- Console output on stderr (stdout belongs to the shell)
- Optional rotating log file
"""

from __future__ import annotations

import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Pattern


_SENSITIVE_PATTERNS: Final[list[tuple[str, Pattern[str]]]] = [
    ("password", re.compile(r'(?i)(password|passwd|pwd)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("key", re.compile(r'(?i)(key|nonce)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("secret", re.compile(r'(?i)(secret|value)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    # Raw key material rendered as base64 or hex
    ("base64_secret", re.compile(r'[A-Za-z0-9+/]{40,}={0,2}')),
    ("hex_secret", re.compile(r'(?i)(?:0x)?[a-f0-9]{32,}')),
]

_REDACTED_TEXT: Final[str] = "[REDACTED]"

CONSOLE_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"


class SecureLogFilter(logging.Filter):
    """
    Log filter that removes sensitive information from log messages.

    Matching fragments in the message and in string arguments are
    replaced with [REDACTED]. Records are never dropped.
    """

    def __init__(self, name: str = "", additional_patterns: Optional[list[Pattern[str]]] = None) -> None:
        super().__init__(name)
        self._additional_patterns = additional_patterns or []

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg and isinstance(record.msg, str):
            record.msg = self._sanitize(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._sanitize(v) if isinstance(v, str) else v
                               for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    self._sanitize(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )

        return True

    def _sanitize(self, text: str) -> str:
        """Remove sensitive data from text."""
        result = text

        for name, pattern in _SENSITIVE_PATTERNS:
            result = pattern.sub(f"{name}={_REDACTED_TEXT}", result)

        for pattern in self._additional_patterns:
            result = pattern.sub(_REDACTED_TEXT, result)

        return result


def get_secure_logger(
    name: str,
    log_dir: Optional[Path] = None,
    level: str = "WARNING",
    enable_console: bool = True,
    enable_file: bool = False,
    max_file_size: int = 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """
    Create a logger with automatic secret filtering.

    Calling this twice for the same name returns the already configured
    logger untouched.

    Args:
        name: Logger name (typically __name__)
        log_dir: Directory for the log file, required when enable_file is set
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Whether to output to stderr
        enable_file: Whether to output to a rotating file in log_dir
        max_file_size: Maximum log file size before rotation
        backup_count: Number of rotated files to keep

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper()))
    secure_filter = SecureLogFilter()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
        console_handler.addFilter(secure_filter)
        logger.addHandler(console_handler)

    if enable_file and log_dir:
        log_path = Path(log_dir).resolve() / f"{name.replace('.', '_')}.log"
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            str(log_path),
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        file_handler.addFilter(secure_filter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def configure_root_logger(
    log_dir: Optional[Path] = None,
    level: str = "WARNING",
    enable_console: bool = True,
    enable_file: bool = False,
    max_file_size: int = 1024 * 1024,
    backup_count: int = 3,
) -> None:
    """
    Configure the package logger once at shell startup.

    Module loggers created with logging.getLogger(__name__) under the
    ``pwstore`` namespace inherit these handlers.
    """
    package_logger = logging.getLogger("pwstore")
    package_logger.handlers.clear()
    get_secure_logger(
        "pwstore",
        log_dir=log_dir,
        level=level,
        enable_console=enable_console,
        enable_file=enable_file,
        max_file_size=max_file_size,
        backup_count=backup_count,
    )
