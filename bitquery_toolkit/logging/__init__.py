"""
Logging setup for bitquery_toolkit.

Modules log through ``logging.getLogger(__name__)``; applications opt in to
the toolkit's handlers with :func:`setup_logging`.
"""

from .filters import SensitiveDataFilter
from .formatters import ColoredFormatter, StructuredFormatter
from .manager import LoggingManager, cleanup_logging, setup_logging

__all__ = [
    "LoggingManager",
    "setup_logging",
    "cleanup_logging",
    "StructuredFormatter",
    "ColoredFormatter",
    "SensitiveDataFilter",
]
