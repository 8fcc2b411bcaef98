"""
GraphQL query builder.

This module provides a fluent interface for assembling a GraphQL operation
string and its variables mapping line by line.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .models import GraphQLOperationType, QueryDocument

logger = logging.getLogger(__name__)


class QueryBuilder:
    """
    Fluent interface for building GraphQL operations.

    Every mutator appends to one in-progress document and returns the builder
    for chaining. Selections passed to :meth:`select` are inserted verbatim, so
    nesting deeper than one level is written by the caller as a multi-line
    string.

    State is kept across :meth:`build` calls: building twice returns the same
    document, and an instance reused for an unrelated document must be cleared
    with :meth:`reset` first (or replaced by a new builder).

    Examples:
        Simple query:
        ```python
        document = (QueryBuilder()
            .operation("query", "GetTokenInfo", "$tokenAddress: String!")
            .select("ethereum", [
                "address(address: {is: $tokenAddress}) { balance }"
            ])
            .set_variables({"tokenAddress": "0xabc"})
            .build()
        )
        ```

        Query with fragments:
        ```python
        document = (QueryBuilder()
            .fragment("TxFields", "Transaction", ["hash", "value"])
            .operation("query", "GetTransactions", "$address: String!")
            .select("ethereum", [
                "transactions(address: $address, limit: 10) { ...TxFields }"
            ])
            .build()
        )
        ```
    """

    def __init__(self) -> None:
        """Initialize an empty builder."""
        self._query = ""
        self._variables: Dict[str, Any] = {}
        self._fragments: Dict[str, str] = {}
        self._operation_name: Optional[str] = None
        self._operation_type = GraphQLOperationType.QUERY

    def operation(
        self,
        kind: Union[str, GraphQLOperationType],
        name: Optional[str] = None,
        variable_definitions: Optional[str] = None,
    ) -> QueryBuilder:
        """
        Start an operation block, discarding previously accumulated fields.

        Args:
            kind: Operation type ("query" or "mutation")
            name: Optional operation name
            variable_definitions: Optional variable definitions, e.g.
                "$address: String!, $limit: Int!"

        Returns:
            Self for chaining
        """
        operation_type = GraphQLOperationType(kind)

        header = operation_type.value
        if name:
            header += f" {name}"
        if variable_definitions:
            header += f"({variable_definitions})"

        self._query = f"{header} {{\n"
        self._operation_name = name or None
        self._operation_type = operation_type
        return self

    def field(
        self, name: str, alias: Optional[str] = None, args: Optional[str] = None
    ) -> QueryBuilder:
        """
        Add a scalar field.

        Args:
            name: Field name
            alias: Optional alias for the field
            args: Optional raw argument text, inserted without validation

        Returns:
            Self for chaining
        """
        self._query += f"  {self._field_head(name, alias, args)}\n"
        return self

    def select(
        self,
        name: str,
        selection_set: Sequence[str],
        alias: Optional[str] = None,
        args: Optional[str] = None,
    ) -> QueryBuilder:
        """
        Add a field with a nested selection set.

        Args:
            name: Field name
            selection_set: Selection lines, each inserted verbatim
            alias: Optional alias for the field
            args: Optional raw argument text

        Returns:
            Self for chaining
        """
        self._query += f"  {self._field_head(name, alias, args)} {{\n"
        for selection in selection_set:
            self._query += f"    {selection}\n"
        self._query += "  }\n"
        return self

    def fragment(
        self, name: str, type_condition: str, fields: Sequence[str]
    ) -> QueryBuilder:
        """
        Register a fragment definition.

        The fragment is emitted ahead of the operation by :meth:`build`; it is
        not added to the selection. Registering the same name again replaces
        the definition in place.

        Args:
            name: Fragment name
            type_condition: Type the fragment applies to
            fields: Fields in the fragment

        Returns:
            Self for chaining
        """
        body = "\n".join(f"  {field_name}" for field_name in fields)
        self._fragments[name] = f"fragment {name} on {type_condition} {{\n{body}\n}}"
        return self

    def spread(self, name: str) -> QueryBuilder:
        """
        Add a fragment spread to the current selection.

        Args:
            name: Fragment name

        Returns:
            Self for chaining
        """
        self._query += f"  ...{name}\n"
        return self

    def set_variables(self, variables: Mapping[str, Any]) -> QueryBuilder:
        """
        Merge variables into the document; later values win.

        Args:
            variables: Variable values keyed by name (without $)

        Returns:
            Self for chaining
        """
        self._variables = {**self._variables, **variables}
        return self

    def reset(self) -> QueryBuilder:
        """
        Clear all accumulated state so the builder can start a new document.

        Returns:
            Self for chaining
        """
        self._query = ""
        self._variables = {}
        self._fragments = {}
        self._operation_name = None
        self._operation_type = GraphQLOperationType.QUERY
        return self

    def build(self) -> QueryDocument:
        """
        Build the document.

        Fragments come first in registration order, each followed by a blank
        line, then the operation and its closing brace. The builder state is
        left untouched.

        Returns:
            QueryDocument snapshot of the current state
        """
        final_query = ""

        for fragment in self._fragments.values():
            final_query += f"{fragment}\n\n"

        final_query += f"{self._query}}}\n"

        return QueryDocument(
            query=final_query,
            variables=dict(self._variables),
            operation_name=self._operation_name,
            operation_type=self._operation_type,
        )

    @staticmethod
    def _field_head(name: str, alias: Optional[str], args: Optional[str]) -> str:
        head = f"{alias}: {name}" if alias else name
        if args:
            head += f"({args})"
        return head

    @staticmethod
    def create_query(
        query_name: str,
        fields: Sequence[Any],
        variables: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> QueryDocument:
        """
        Build a flat query selecting plain scalar fields.

        Variable types are inferred from the runtime value: numbers become
        ``Int!`` and everything else (booleans included) ``String!``.

        Args:
            query_name: Operation name
            fields: Field names to select; non-string entries are skipped
            variables: Variables for the query
            options: Reserved for query options; currently unused

        Returns:
            QueryDocument for the query
        """
        variables = dict(variables or {})
        builder = QueryBuilder()

        definitions: List[str] = [
            f"${key}: {_infer_variable_type(value)}" for key, value in variables.items()
        ]
        builder.operation(
            GraphQLOperationType.QUERY, query_name, ", ".join(definitions) or None
        )

        for field_name in fields:
            if isinstance(field_name, str):
                builder.field(field_name)
            else:
                logger.warning(
                    "Nested fields are not supported by create_query; skipping %r",
                    field_name,
                )

        if variables:
            builder.set_variables(variables)

        return builder.build()


def _infer_variable_type(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return "Int!"
    return "String!"
