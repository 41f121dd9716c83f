"""Logging module with console output and optional rotating file logging."""

import sys
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


class Logger:
    """Logger with console and file output.

    Console output goes to stderr; stdout is reserved for script results that
    workflows capture (e.g. the PR list printed by get_prs.py).
    """

    def __init__(self, level=logging.INFO, log_file: Optional[str] = None,
                 max_bytes: int = 10 * 1024 * 1024, backup_count: int = 5):
        """Initialize logger.

        Args:
            level: Logging level (default: INFO)
            log_file: Path to log file (optional, enables file logging)
            max_bytes: Maximum log file size before rotation (default: 10MB)
            backup_count: Number of backup files to keep (default: 5)
        """
        self.logger = logging.getLogger("sel4_ci")
        self.logger.setLevel(level)
        self.logger.handlers = []  # Clear any existing handlers
        self.logger.propagate = False

        self.log_format = '[%(asctime)s][%(levelname)-8s]: %(message)s'
        self.timestamp_format = "%y-%m-%d %H:%M:%S"
        self.formatter = logging.Formatter(fmt=self.log_format, datefmt=self.timestamp_format)

        self.console_handler = logging.StreamHandler(stream=sys.stderr)
        self.console_handler.setFormatter(self.formatter)
        self.console_handler.setLevel(level)
        self.logger.addHandler(self.console_handler)

        self.file_handler = None
        if log_file:
            self._setup_file_handler(log_file, max_bytes, backup_count)

    def _setup_file_handler(self, log_file: str, max_bytes: int, backup_count: int):
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            self.file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8'
            )
            self.file_handler.setFormatter(self.formatter)
            self.file_handler.setLevel(self.logger.level)
            self.logger.addHandler(self.file_handler)

        except OSError as e:
            # If file logging fails, just log to console
            self.logger.warning(f"Failed to setup file logging: {e}")
            self.file_handler = None

    @staticmethod
    def _join(args) -> str:
        return ' '.join(str(arg) for arg in args)

    def info(self, *args):
        """Log info message."""
        self.logger.info(self._join(args))

    def warning(self, *args):
        """Log warning message."""
        self.logger.warning(self._join(args))

    def error(self, *args):
        """Log error message."""
        self.logger.error(self._join(args))

    def debug(self, *args):
        """Log debug message."""
        self.logger.debug(self._join(args))

    def enable_file_logging(self, log_file: str, max_bytes: int = 10 * 1024 * 1024,
                           backup_count: int = 5):
        """Enable file logging with rotation.

        Args:
            log_file: Path to log file
            max_bytes: Max file size before rotation in bytes (default: 10MB)
            backup_count: Number of backup files to keep (default: 5)
        """
        if self.file_handler:
            self.logger.warning("File logging already enabled")
            return

        self._setup_file_handler(log_file, max_bytes, backup_count)
        if self.file_handler:
            self.logger.debug(f"File logging enabled: {log_file}")


# Global logger instance
log = Logger()


def set_log_level(level_str: str):
    """Set global logging level from string.

    Args:
        level_str: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }

    level = level_map.get(level_str.upper(), logging.INFO)
    log.logger.setLevel(level)
    log.console_handler.setLevel(level)
    if log.file_handler:
        log.file_handler.setLevel(level)
