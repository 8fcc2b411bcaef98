"""
GraphQL models and data structures.

This module defines the documents produced by the builder and templates and
the normalized envelope produced by the response parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class GraphQLOperationType(str, Enum):
    """GraphQL operation types."""

    QUERY = "query"
    MUTATION = "mutation"


@dataclass(frozen=True)
class QueryDocument:
    """A GraphQL operation text plus its variable bindings, ready to send."""

    query: str
    variables: Dict[str, Any] = field(default_factory=dict)
    operation_name: Optional[str] = None
    operation_type: GraphQLOperationType = GraphQLOperationType.QUERY

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON request body."""
        return {
            "query": self.query,
            "variables": self.variables,
        }


@dataclass
class ResponseEnvelope:
    """
    Normalized result of a GraphQL call.

    ``success`` is true exactly when ``errors`` is absent or empty.
    """

    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[Dict[str, Any]]] = None
    success: bool = False

    @property
    def has_errors(self) -> bool:
        """Check if the envelope carries errors."""
        return bool(self.errors)

    @property
    def error_messages(self) -> List[str]:
        """Get list of error messages."""
        return [error.get("message") or "Unknown error" for error in self.errors or []]

    @property
    def error_codes(self) -> List[Any]:
        """Get the ``extensions.code`` of every error that has one."""
        codes = []
        for error in self.errors or []:
            extensions = error.get("extensions") or {}
            if "code" in extensions:
                codes.append(extensions["code"])
        return codes

    def get_data(self, path: Optional[str] = None) -> Any:
        """
        Get data from the envelope with optional path.

        Args:
            path: Dot-separated path to data (e.g., "ethereum.address.0.balances")

        Returns:
            Data at the specified path, the full data if no path, or None
        """
        if self.data is None:
            return None

        if not path:
            return self.data

        from .parser import ResponseParser

        return ResponseParser.get_nested_value(self.data, path)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain ``{data, errors, success}`` mapping."""
        return {
            "data": self.data,
            "errors": self.errors,
            "success": self.success,
        }
