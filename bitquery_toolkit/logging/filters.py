"""
Custom logging filters for bitquery_toolkit.

This module provides masking of OAuth credentials and bearer tokens so that
they never reach log output.
"""

import logging
import re
from typing import List, Pattern, Tuple

MASK = "***MASKED***"


class SensitiveDataFilter(logging.Filter):
    """Filter to mask credentials in log messages."""

    def __init__(self) -> None:
        """Initialize sensitive data filter."""
        super().__init__()

        self.patterns: List[Tuple[Pattern[str], str]] = [
            # Authorization: Bearer <token>
            (re.compile(r"(bearer\s+)([A-Za-z0-9\-._~+/]+=*)", re.IGNORECASE), rf"\1{MASK}"),
            # access_token / client_secret in JSON, form or repr output
            (
                re.compile(
                    r"""(["']?(?:access_token|client_secret)["']?\s*[:=]\s*["']?)([^"'\s&,}]+)""",
                    re.IGNORECASE,
                ),
                rf"\1{MASK}",
            ),
        ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record to mask sensitive data."""
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Leave malformed records for the handler to report.
            return True

        for pattern, replacement in self.patterns:
            message = pattern.sub(replacement, message)

        record.msg = message
        record.args = ()
        return True
