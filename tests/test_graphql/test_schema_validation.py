"""
Tests for the shape schema validator.
"""

import pytest

from bitquery_toolkit.graphql.schema import (
    ObjectSchema,
    ScalarKind,
    ScalarSchema,
    SchemaMismatch,
    compile_schema,
    json_type_name,
    match,
)


class TestJsonTypeName:
    """Test typeof-style naming of decoded JSON values."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("x", "string"),
            (1, "number"),
            (1.5, "number"),
            (True, "boolean"),
            (None, "object"),
            ({}, "object"),
            ([], "object"),
        ],
    )
    def test_names(self, value, expected):
        """Test each JSON value type."""
        assert json_type_name(value) == expected


class TestCompileSchema:
    """Test compilation of shape literals."""

    def test_compiles_nested_shape(self):
        """Test literal to tagged union."""
        schema = compile_schema({"user": {"id": "string", "age": "number"}})

        assert schema == ObjectSchema(
            fields={
                "user": ObjectSchema(
                    fields={
                        "id": ScalarSchema(ScalarKind.STRING),
                        "age": ScalarSchema(ScalarKind.NUMBER),
                    }
                )
            }
        )

    def test_compiled_schema_passes_through(self):
        """Test already compiled schemas are reused."""
        schema = ObjectSchema(fields={"x": ScalarSchema(ScalarKind.BOOLEAN)})

        assert compile_schema(schema) is schema

    def test_unknown_type_name(self):
        """Test unknown names are rejected."""
        with pytest.raises(ValueError, match="Unknown schema type name"):
            compile_schema({"x": "integer"})

    def test_scalar_root_rejected(self):
        """Test the root must be an object schema."""
        with pytest.raises(ValueError):
            compile_schema(ScalarSchema(ScalarKind.STRING))


class TestMatch:
    """Test matching values against schemas."""

    def test_mismatch_reports_path(self):
        """Test the failing path is reported."""
        with pytest.raises(SchemaMismatch) as exc_info:
            match({"user": {"id": 1}}, {"user": {"id": "string"}})

        assert exc_info.value.path == "user.id"
        assert "expected string, got number" in str(exc_info.value)

    def test_undefined_matches_missing_key(self):
        """Test the undefined kind requires an absent key."""
        match({"a": 1}, {"b": "undefined"})

        with pytest.raises(SchemaMismatch):
            match({"b": None}, {"b": "undefined"})

    def test_list_children_by_index(self):
        """Test object schemas address list items by digit key."""
        match({"items": [{"id": "a"}]}, {"items": {"0": {"id": "string"}}})

        with pytest.raises(SchemaMismatch):
            match({"items": []}, {"items": {"0": {"id": "string"}}})

    def test_non_canonical_index_keys(self):
        """Test list children are not addressed by leading-zero or non-ASCII digits."""
        match({"items": ["x"]}, {"items": {"0": "string"}})

        with pytest.raises(SchemaMismatch):
            match({"items": ["x", "y"]}, {"items": {"01": "string"}})
        with pytest.raises(SchemaMismatch):
            match({"items": ["x", "y"]}, {"items": {"²": "string"}})

    def test_extra_keys_are_allowed(self):
        """Test only keys named by the schema are checked."""
        match({"a": "x", "b": 2}, {"a": "string"})
