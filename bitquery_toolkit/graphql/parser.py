"""
GraphQL response normalization.

Every response the toolkit hands back to callers passes through
:class:`ResponseParser`, which folds raw upstream JSON into a
:class:`~bitquery_toolkit.graphql.models.ResponseEnvelope`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from .models import ResponseEnvelope
from .schema import Schema, SchemaMismatch, list_index, match

logger = logging.getLogger(__name__)

PARSER_ERROR = "PARSER_ERROR"

_MISSING = object()

ResponseLike = Union[ResponseEnvelope, Mapping[str, Any]]


class ResponseParser:
    """
    Normalizes raw GraphQL responses and reads fields out of them.

    Examples:
        ```python
        envelope = ResponseParser.parse(raw)
        if envelope.success:
            fields = ResponseParser.extract_fields(
                envelope, ["ethereum.dexTrades.0.quotePrice"]
            )
        ```
    """

    @staticmethod
    def parse(response: Optional[Mapping[str, Any]]) -> ResponseEnvelope:
        """
        Parse a raw GraphQL response into an envelope.

        Args:
            response: Decoded JSON body, or None when nothing was received

        Returns:
            ResponseEnvelope; ``success`` is true when ``errors`` is absent or empty
        """
        if response is None:
            return ResponseParser.create_error_response("No response received")

        data = response.get("data")
        errors = response.get("errors")

        if errors and data is None:
            return ResponseParser.handle_errors(errors)

        return ResponseEnvelope(data=data, errors=errors, success=not errors)

    @staticmethod
    def handle_errors(errors: Iterable[Mapping[str, Any]]) -> ResponseEnvelope:
        """
        Format GraphQL errors into a failed envelope.

        Args:
            errors: Raw GraphQL error objects

        Returns:
            Envelope with ``data`` None and one formatted error per input error
        """
        formatted = [
            {
                "message": error.get("message"),
                "path": error.get("path"),
                "extensions": error.get("extensions"),
                "locations": error.get("locations"),
            }
            for error in errors
        ]

        return ResponseEnvelope(data=None, errors=formatted, success=False)

    @staticmethod
    def create_error_response(
        message: str, extensions: Optional[Mapping[str, Any]] = None
    ) -> ResponseEnvelope:
        """
        Create a single-error envelope.

        The error is tagged ``PARSER_ERROR``; a ``code`` supplied in
        ``extensions`` replaces that tag.

        Args:
            message: Error message
            extensions: Additional error details

        Returns:
            Failed envelope with one error
        """
        return ResponseEnvelope(
            data=None,
            errors=[
                {
                    "message": message,
                    "extensions": {"code": PARSER_ERROR, **(extensions or {})},
                }
            ],
            success=False,
        )

    @staticmethod
    def extract_fields(response: ResponseLike, paths: Iterable[str]) -> Dict[str, Any]:
        """
        Extract values from response data by dot-notation paths.

        List elements are addressed by index segments ("dexTrades.0.price").
        Paths that do not resolve are left out of the result.

        Args:
            response: Envelope or raw response mapping
            paths: Dot-notation paths to extract

        Returns:
            Mapping of path to resolved value
        """
        data = _data_of(response)
        if data is None:
            return {}

        result: Dict[str, Any] = {}
        for path in paths:
            value = _resolve(data, path)
            if value is not _MISSING:
                result[path] = value

        return result

    @staticmethod
    def get_nested_value(obj: Any, path: str) -> Any:
        """
        Get a nested value using dot notation.

        Args:
            obj: Object to traverse
            path: Dot-notation path

        Returns:
            The value at the path, or None when it does not resolve
        """
        value = _resolve(obj, path)
        return None if value is _MISSING else value

    @staticmethod
    def validate_schema(
        response: ResponseLike, schema: Union[Mapping[str, Any], Schema]
    ) -> bool:
        """
        Validate response data against an expected shape.

        Args:
            response: Envelope or raw response mapping
            schema: Shape literal (e.g. ``{"user": {"id": "string"}}``) or a
                compiled schema

        Returns:
            True only when every key in the schema matches; never raises
        """
        data = _data_of(response)
        if data is None:
            return False

        try:
            match(data, schema)
        except (SchemaMismatch, ValueError) as e:
            logger.warning("Schema validation failed: %s", e)
            return False

        return True


def _data_of(response: ResponseLike) -> Any:
    if isinstance(response, ResponseEnvelope):
        return response.data
    return response.get("data")


def _resolve(obj: Any, path: str) -> Any:
    current = obj
    for key in path.split("."):
        current = _step(current, key)
        if current is _MISSING:
            break
    return current


def _step(current: Any, key: str) -> Any:
    # Only containers can be descended into.
    if isinstance(current, dict):
        return current.get(key, _MISSING)
    if isinstance(current, list):
        index = list_index(key)
        if index is not None and index < len(current):
            return current[index]
    return _MISSING
