"""
Logging manager for bitquery_toolkit.

This module installs console and file handlers on the root logger according
to a :class:`~bitquery_toolkit.config.LoggingConfig`.
"""

import logging
import sys
from pathlib import Path
from typing import Dict

from ..config import LoggingConfig, LogLevel
from .filters import SensitiveDataFilter
from .formatters import ColoredFormatter, StructuredFormatter


class LoggingManager:
    """Centralized logging manager."""

    def __init__(self) -> None:
        """Initialize logging manager."""
        self._configured = False
        self._handlers: Dict[str, logging.Handler] = {}

    def setup_logging(self, config: LoggingConfig) -> None:
        """
        Setup logging based on configuration.

        Calling this again replaces the handlers installed by the previous
        call; handlers installed by anyone else are left alone.

        Args:
            config: Logging configuration
        """
        if self._configured:
            self.cleanup()

        level = getattr(logging, LogLevel(config.level).value)
        logging.getLogger().setLevel(level)

        if config.enable_console:
            self._setup_console_handler(config, level)

        if config.file_path:
            self._setup_file_handler(config, level)

        self._configured = True

        logger = logging.getLogger(__name__)
        logger.debug("Logging system configured at level %s", logging.getLevelName(level))

    def _formatter(self, config: LoggingConfig, colored: bool) -> logging.Formatter:
        if config.enable_structured:
            return StructuredFormatter()
        if colored:
            return ColoredFormatter(config.format)
        return logging.Formatter(config.format)

    def _setup_console_handler(self, config: LoggingConfig, level: int) -> None:
        """Setup console logging handler."""
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(self._formatter(config, colored=True))
        self.add_handler("console", handler, level)

    def _setup_file_handler(self, config: LoggingConfig, level: int) -> None:
        """Setup file logging handler."""
        log_path = Path(str(config.file_path))
        log_path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(str(log_path), encoding="utf-8")
        handler.setFormatter(self._formatter(config, colored=False))
        self.add_handler("file", handler, level)

    def add_handler(self, name: str, handler: logging.Handler, level: int = logging.NOTSET) -> None:
        """
        Add a handler to the root logger with credential masking attached.

        Args:
            name: Handler name
            handler: Logging handler
            level: Handler level
        """
        handler.setLevel(level)
        if not any(isinstance(f, SensitiveDataFilter) for f in handler.filters):
            handler.addFilter(SensitiveDataFilter())

        logging.getLogger().addHandler(handler)
        self._handlers[name] = handler

    def set_level(self, level: LogLevel) -> None:
        """
        Set the root logging level and the level of managed handlers.

        Args:
            level: New logging level
        """
        log_level = getattr(logging, LogLevel(level).value)
        logging.getLogger().setLevel(log_level)

        for handler in self._handlers.values():
            handler.setLevel(log_level)

    def cleanup(self) -> None:
        """Remove and close the handlers installed by this manager."""
        root_logger = logging.getLogger()
        for handler in self._handlers.values():
            root_logger.removeHandler(handler)
            handler.close()

        self._handlers.clear()
        self._configured = False

    @property
    def handlers(self) -> Dict[str, logging.Handler]:
        """Handlers currently installed, by name."""
        return dict(self._handlers)

    def is_configured(self) -> bool:
        """Check if logging is configured."""
        return self._configured


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(config: LoggingConfig) -> LoggingManager:
    """
    Setup logging with configuration.

    Args:
        config: Logging configuration

    Returns:
        The global LoggingManager
    """
    _logging_manager.setup_logging(config)
    return _logging_manager


def cleanup_logging() -> None:
    """Cleanup logging system."""
    _logging_manager.cleanup()
