"""
Shallow response shape validation.

A schema is either a :class:`ScalarSchema` naming a JSON type, or an
:class:`ObjectSchema` mapping keys to nested schemas. Shapes are usually
written as plain literals and compiled with :func:`compile_schema`::

    compile_schema({"ethereum": {"address": {"balance": "number"}}})

Type names follow the JavaScript ``typeof`` vocabulary used by Bitquery
examples: ``"string"``, ``"number"``, ``"boolean"``, ``"object"`` (which also
covers lists and null) and ``"undefined"`` for a missing key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

_MISSING = object()


class ScalarKind(str, Enum):
    """JSON type names a scalar schema can require."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    UNDEFINED = "undefined"


class SchemaMismatch(Exception):
    """Raised internally when a value does not match its schema."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass(frozen=True)
class ScalarSchema:
    """Requires the value's JSON type name to equal ``kind`` exactly."""

    kind: ScalarKind

    def check(self, value: Any, path: str) -> None:
        actual = json_type_name(value)
        if actual != self.kind.value:
            raise SchemaMismatch(path, f"expected {self.kind.value}, got {actual}")


@dataclass(frozen=True)
class ObjectSchema:
    """Requires a present, non-null object and matches each field recursively."""

    fields: Dict[str, "Schema"] = field(default_factory=dict)

    def check(self, value: Any, path: str) -> None:
        for key, child in self.fields.items():
            child_path = f"{path}.{key}" if path else key
            child_value = _child(value, key)

            if isinstance(child, ObjectSchema):
                if child_value is _MISSING or not isinstance(child_value, (dict, list)):
                    raise SchemaMismatch(child_path, "expected object")

            child.check(child_value, child_path)


Schema = Union[ScalarSchema, ObjectSchema]


def json_type_name(value: Any) -> str:
    """Return the ``typeof``-style type name of a decoded JSON value."""
    if value is _MISSING:
        return ScalarKind.UNDEFINED.value
    if isinstance(value, bool):
        return ScalarKind.BOOLEAN.value
    if isinstance(value, (int, float)):
        return ScalarKind.NUMBER.value
    if isinstance(value, str):
        return ScalarKind.STRING.value
    return ScalarKind.OBJECT.value


def compile_schema(shape: Union[Mapping[str, Any], Schema]) -> ObjectSchema:
    """
    Compile a shape literal into a schema tree.

    Args:
        shape: Mapping of keys to type names or nested mappings, or an
            already compiled schema

    Returns:
        Root ObjectSchema

    Raises:
        ValueError: If the shape contains an unknown type name
    """
    if isinstance(shape, ObjectSchema):
        return shape
    if isinstance(shape, ScalarSchema):
        raise ValueError("Root schema must describe an object")

    return ObjectSchema(fields={key: _compile_node(node) for key, node in shape.items()})


def _compile_node(node: Any) -> Schema:
    if isinstance(node, (ScalarSchema, ObjectSchema)):
        return node
    if isinstance(node, Mapping):
        return compile_schema(node)
    try:
        return ScalarSchema(ScalarKind(node))
    except ValueError:
        raise ValueError(f"Unknown schema type name: {node!r}") from None


def list_index(key: str) -> Optional[int]:
    """
    Return the list index a path segment names, or None.

    Only canonical ASCII integers qualify: leading zeros and non-ASCII
    digits name no index.
    """
    if not (key.isascii() and key.isdigit()):
        return None
    if key != "0" and key.startswith("0"):
        return None
    return int(key)


def _child(value: Any, key: str) -> Any:
    if isinstance(value, dict):
        return value.get(key, _MISSING)
    if isinstance(value, list):
        index = list_index(key)
        if index is not None and index < len(value):
            return value[index]
    return _MISSING


def match(value: Any, schema: Union[Mapping[str, Any], Schema]) -> None:
    """
    Match a value against a schema.

    Raises:
        SchemaMismatch: On the first mismatching key
    """
    compile_schema(schema).check(value, "")
