"""
Exception hierarchy for bitquery_toolkit.

This module defines the errors raised by the toolkit and helpers that convert
low-level aiohttp failures into them. Only setup-time failures (credentials,
configuration, query files) are raised to callers; transport and upstream
GraphQL failures are folded into response envelopes by the client.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, Optional

import aiohttp

#: HTTP status codes the transport retries before giving up.
RETRYABLE_STATUS_CODES = (408, 429, 500, 502, 503, 504)


class BitqueryError(Exception):
    """
    Base exception for all toolkit errors.

    Attributes:
        message: Human-readable error message
        url: URL that caused the error (if applicable)
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.details = kwargs


class AuthenticationError(BitqueryError):
    """Raised when the OAuth token request fails or returns no token."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, url)
        self.status_code = status_code
        self.original_error = original_error


class ConfigurationError(BitqueryError):
    """Raised for invalid or missing configuration values."""

    pass


class QueryFileError(BitqueryError):
    """Raised when a .graphql document cannot be read."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class NetworkError(BitqueryError):
    """
    Raised for network-related errors.

    Covers connectivity issues, DNS failures and other problems that prevent
    a response from being received at all.
    """

    pass


class ConnectionError(NetworkError):
    """Raised when a connection to the server cannot be established."""

    pass


class TimeoutError(NetworkError):
    """
    Raised when a request times out.

    Attributes:
        timeout_value: The timeout value that was exceeded (in seconds)
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout_value: Optional[float] = None,
    ) -> None:
        super().__init__(message, url)
        self.timeout_value = timeout_value


class HTTPError(BitqueryError):
    """Raised when the server answers with a non-200 status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        url: Optional[str] = None,
        response_text: Optional[str] = None,
        response_data: Optional[Any] = None,
    ) -> None:
        super().__init__(message, url)
        self.status_code = status_code
        self.response_text = response_text
        self.response_data = response_data


class RetryableHTTPError(HTTPError):
    """HTTP error whose status code is covered by the retry policy."""

    pass


class ErrorHandler:
    """
    Utility class for categorizing transport errors.

    Converts aiohttp exceptions and raw status codes into toolkit exceptions
    so the retry handler and the client only deal with one hierarchy.
    """

    @staticmethod
    def handle_aiohttp_error(
        error: Exception, url: Optional[str] = None
    ) -> BitqueryError:
        """
        Convert aiohttp exceptions to BitqueryError subclasses.

        Args:
            error: The original aiohttp exception
            url: The URL that caused the error

        Returns:
            Appropriate BitqueryError subclass
        """
        if isinstance(error, BitqueryError):
            return error

        if isinstance(error, asyncio.TimeoutError):
            return TimeoutError(f"Request timed out: {error}", url=url)

        elif isinstance(error, aiohttp.ClientConnectionError):
            return ConnectionError(f"Connection error: {error}", url=url)

        else:
            return NetworkError(f"Unexpected network error: {error}", url=url)

    @staticmethod
    def handle_http_status_error(
        status_code: int,
        message: str,
        url: Optional[str] = None,
        response_text: Optional[str] = None,
        response_data: Optional[Any] = None,
        retry_on: Iterable[int] = RETRYABLE_STATUS_CODES,
    ) -> HTTPError:
        """
        Create the HTTPError subclass matching a status code.

        Args:
            status_code: HTTP status code
            message: Error message
            url: The URL that caused the error
            response_text: Response body text
            response_data: Decoded response body, when it was JSON
            retry_on: Status codes considered retryable

        Returns:
            RetryableHTTPError for retryable codes, HTTPError otherwise
        """
        error_cls = (
            RetryableHTTPError
            if ErrorHandler.is_retryable_status(status_code, retry_on)
            else HTTPError
        )
        return error_cls(
            message,
            status_code,
            url=url,
            response_text=response_text,
            response_data=response_data,
        )

    @staticmethod
    def is_retryable_status(
        status_code: int, retry_on: Iterable[int] = RETRYABLE_STATUS_CODES
    ) -> bool:
        """Check whether a status code is covered by the retry policy."""
        return status_code in set(retry_on)

    @staticmethod
    def is_retryable_error(
        error: Exception, retry_on: Iterable[int] = RETRYABLE_STATUS_CODES
    ) -> bool:
        """
        Determine if an error is retryable.

        Network failures without a response are retryable; HTTP errors are
        retryable only when their status code is in ``retry_on``.
        """
        if isinstance(error, HTTPError):
            return ErrorHandler.is_retryable_status(error.status_code, retry_on)

        if isinstance(error, NetworkError):
            return True

        return False

    @staticmethod
    def summarize(error: BitqueryError) -> Dict[str, Any]:
        """Return a loggable summary of an error."""
        summary: Dict[str, Any] = {
            "type": type(error).__name__,
            "message": error.message,
        }
        if error.url:
            summary["url"] = error.url
        status_code = getattr(error, "status_code", None)
        if status_code is not None:
            summary["status"] = status_code
        return summary
