"""
Pipeline Logging

Structured logging for the site data pipeline. Messages go to the standard
``logging`` hierarchy under the ``supportmatrix`` logger and are also kept in
memory, so a build can summarize what was dropped and tests can assert on it.

Usage:
    from supportmatrix.data.logging import PipelineLogger, get_logger

    # Install a fresh logger for one load
    logger = PipelineLogger()

    # Get the logger instance from any module
    log = get_logger()
    log.warning("Invalid frontmatter for board foo")
    log.summary("Loaded", boards=12, reports=80)

    print(logger.warnings)
"""

import logging
from dataclasses import dataclass
from typing import List, Optional


# Module-level logger instance
_pipeline_logger: Optional['PipelineLogger'] = None


def get_logger() -> 'PipelineLogger':
    """
    Get the current pipeline logger instance.

    Returns:
        The active PipelineLogger, or a default one if none was installed.
    """
    global _pipeline_logger
    if _pipeline_logger is None:
        _pipeline_logger = PipelineLogger()
    return _pipeline_logger


def set_logger(logger: 'PipelineLogger'):
    """Set the module-level pipeline logger."""
    global _pipeline_logger
    _pipeline_logger = logger


@dataclass
class LogConfig:
    """Configuration for pipeline logging."""

    # Name of the stdlib logger messages are forwarded to
    logger_name: str = "supportmatrix"

    # Maximum number of buffered lines, warnings and errors (oldest are dropped first)
    max_buffered_lines: int = 10000

    # Width for section separators
    separator_width: int = 60


class PipelineLogger:
    """
    Logger for the data pipeline.

    Provides:
    - Forwarding to the stdlib ``logging`` hierarchy
    - An in-memory buffer of every message
    - A separate list of warning and error messages for build summaries
    """

    def __init__(self, config: Optional[LogConfig] = None, install: bool = True):
        """
        Initialize the pipeline logger.

        Args:
            config: Optional LogConfig for advanced configuration.
            install: If True, register as the module-level logger.
        """
        self.config = config or LogConfig()
        self._logger = logging.getLogger(self.config.logger_name)
        self._lines: List[str] = []
        self.warnings: List[str] = []
        self.errors: List[str] = []

        if install:
            set_logger(self)

    def _append(self, buffer: List[str], message: str):
        buffer.append(message)
        overflow = len(buffer) - self.config.max_buffered_lines
        if overflow > 0:
            del buffer[:overflow]

    def _record(self, message: str):
        self._append(self._lines, message)

    def info(self, message: str):
        """Log an informational message."""
        self._record(message)
        self._logger.info(message)

    def debug(self, message: str):
        """Log a debug message."""
        self._record(message)
        self._logger.debug(message)

    def warning(self, message: str):
        """Log a warning; the item it describes was excluded."""
        self._record(f"WARNING: {message}")
        self._append(self.warnings, message)
        self._logger.warning(message)

    def error(self, message: str, exc_info: bool = False):
        """Log an error message."""
        self._record(f"ERROR: {message}")
        self._append(self.errors, message)
        self._logger.error(message, exc_info=exc_info)

    def section(self, title: str):
        """Log a section header."""
        self.info("")
        self.info(title)
        self.info("-" * self.config.separator_width)

    def summary(self, title: str, **metrics):
        """
        Log a summary with key-value metrics.

        Args:
            title: Summary title
            **metrics: Key-value pairs to display
        """
        self.info(f"{title}:")
        for key, value in metrics.items():
            formatted_key = key.replace("_", " ").title()
            self.info(f"  {formatted_key}: {value}")

    def get_content(self) -> str:
        """Get all logged content as a string."""
        return "\n".join(self._lines)

    def clear(self):
        """Drop buffered messages, warnings and errors."""
        self._lines.clear()
        self.warnings.clear()
        self.errors.clear()
