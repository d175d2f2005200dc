"""
Unit Tests for Form Schema Models

Tests construction, normalization and wire format of FormField/FormSchema.
"""

import pytest
from pydantic import ValidationError

from services.form.schema import FormField, FormSchema, ReconciliationResult


class TestFormField:
    """Tests for single field definitions."""

    def test_defaults(self):
        """A bare name yields an optional text field."""
        field = FormField(name="city")
        assert field.type == "text"
        assert field.required is False
        assert field.is_nested is False

    def test_nested_forces_type(self):
        """Non-empty nested children force type 'nested'."""
        field = FormField(name="address", type="text", nested=[FormField(name="city")])
        assert field.type == "nested"
        assert field.is_nested is True

    def test_empty_nested_keeps_type(self):
        """An empty nested list does not turn a field into a group."""
        field = FormField(name="notes", type="textarea", nested=[])
        assert field.type == "textarea"
        assert field.is_nested is False

    def test_empty_name_rejected(self):
        """Field names must be non-empty."""
        with pytest.raises(ValidationError):
            FormField(name="")

    def test_duplicate_child_names_rejected(self):
        """Children of one group must have unique names."""
        with pytest.raises(ValidationError):
            FormField(name="address", nested=[FormField(name="city"), FormField(name="city")])

    def test_camel_case_aliases(self):
        """Wire keys minLength/maxLength map to snake_case attributes."""
        field = FormField.model_validate({"name": "zip", "minLength": 5, "maxLength": 10, "isNested": False})
        assert field.min_length == 5
        assert field.max_length == 10

    def test_immutable(self):
        """Fields are frozen."""
        field = FormField(name="city")
        with pytest.raises(ValidationError):
            field.name = "town"


class TestFormSchema:
    """Tests for the schema container."""

    def test_total_fields_defaults_to_top_level_count(self, contact_schema):
        """totalFields counts top-level fields only."""
        assert contact_schema.total_fields == 3

    def test_explicit_total_fields_kept(self):
        """An explicit totalFields is respected."""
        schema = FormSchema.model_validate({"fields": [{"name": "a"}], "totalFields": 7})
        assert schema.total_fields == 7

    def test_duplicate_top_level_names_rejected(self):
        """Top-level field names must be unique."""
        with pytest.raises(ValidationError):
            FormSchema.model_validate({"fields": [{"name": "email"}, {"name": "email"}]})

    def test_get_field(self, contact_schema):
        """Top-level lookup by name."""
        assert contact_schema.get_field("email").type == "email"
        assert contact_schema.get_field("missing") is None

    def test_payload_uses_wire_keys(self, contact_schema):
        """to_payload emits camelCase keys and omits unset values."""
        payload = contact_schema.to_payload()
        assert payload["formName"] == "Contact"
        assert payload["totalFields"] == 3
        zip_field = payload["fields"][2]["nested"][1]
        assert zip_field == {"name": "zip", "type": "text", "required": False, "pattern": "^[0-9]{5}$"}


class TestReconciliationResult:
    """Tests for the result container."""

    def test_failure_shape(self):
        """A failure carries only a general error."""
        result = ReconciliationResult.failure("boom")
        assert result.success is False
        assert result.data == {}
        assert result.updated_fields == []
        assert result.errors == {"general": "boom"}

    def test_wire_key(self):
        """updated_fields serializes as updatedFields."""
        dumped = ReconciliationResult(updated_fields=["a"]).model_dump(by_alias=True)
        assert dumped["updatedFields"] == ["a"]
