"""
Unit Tests for the Form Fill Session

Tests schema handling and the transcript pipeline with a fake gateway.
"""

import json
import pytest

from services.form.filler import FormFillSession, parse_speech_to_form
from services.form.schema import FieldMapping, FormFillConfig
from utils.exceptions import AIServiceError, SchemaError


FORM_HTML = """
<form name="contact">
  <input name="firstName" required>
  <input name="zip" pattern="^[0-9]{5}$">
</form>
"""


class TestSchemaHandling:
    """Tests for detecting and setting the schema."""

    def test_detect_form(self, make_gateway):
        session = FormFillSession(make_gateway())
        schema = session.detect_form(FORM_HTML)

        assert session.schema is schema
        assert schema.form_name == "contact"
        assert [f.name for f in schema.fields] == ["firstName", "zip"]

    def test_detect_without_form(self, make_gateway):
        with pytest.raises(SchemaError):
            FormFillSession(make_gateway()).detect_form("<p>No form here</p>")

    def test_detect_empty_form(self, make_gateway):
        with pytest.raises(SchemaError):
            FormFillSession(make_gateway()).detect_form('<form><input type="submit"></form>')

    def test_set_schema_replaces(self, make_gateway, contact_schema):
        session = FormFillSession(make_gateway())
        session.detect_form(FORM_HTML)
        session.set_schema(contact_schema)
        assert session.schema is contact_schema

    @pytest.mark.asyncio
    async def test_process_requires_schema(self, make_gateway):
        with pytest.raises(SchemaError):
            await FormFillSession(make_gateway()).process_transcript("hello")


class TestProcessTranscript:
    """Tests for the full pipeline."""

    @pytest.mark.asyncio
    async def test_prompts_reach_gateway(self, make_gateway, contact_schema):
        """The gateway sees the schema listing and the preprocessed transcript."""
        gateway = make_gateway(response="{}")
        session = FormFillSession(gateway, schema=contact_schema)
        await session.process_transcript("zip seven eight seven zero one")

        system_prompt, user_prompt = gateway.calls[0]
        assert "**firstName**" in system_prompt
        assert 'Speech transcript: "zip 7 8 7 0 1"' in user_prompt

    @pytest.mark.asyncio
    async def test_schema_constraints_applied_by_default(self, make_gateway):
        """Without validate_field the schema's own rules reject bad values."""
        gateway = make_gateway(response=json.dumps({"firstName": "Jane", "zip": "abc"}))
        session = FormFillSession(gateway)
        session.detect_form(FORM_HTML)

        result = await session.process_transcript("my name is Jane, zip a b c")
        assert result.data == {"firstName": "Jane"}
        assert result.errors == {"zip": "Invalid format"}

    @pytest.mark.asyncio
    async def test_custom_validator_used(self, make_gateway, contact_schema):
        gateway = make_gateway(response='{"firstName": "Jane"}')
        config = FormFillConfig(validate_field=lambda name, value: "nope")
        result = await FormFillSession(gateway, config, contact_schema).process_transcript("Jane")
        assert result.errors == {"firstName": "nope"}

    @pytest.mark.asyncio
    async def test_field_mappings(self, make_gateway, contact_schema):
        gateway = make_gateway(response='{"first_name": "jane"}')
        config = FormFillConfig(field_mappings={"firstName": FieldMapping(transform=str.title)})
        result = await FormFillSession(gateway, config, contact_schema).process_transcript("jane")
        assert result.data == {"firstName": "Jane"}
        assert result.updated_fields == ["firstName"]

    @pytest.mark.asyncio
    async def test_gateway_failure_becomes_result(self, make_gateway, contact_schema):
        """Provider errors are reported as a failed result."""
        gateway = make_gateway(error=AIServiceError("openai request failed", service="openai"))
        result = await FormFillSession(gateway, schema=contact_schema).process_transcript("hi")

        assert result.success is False
        assert result.errors == {"general": "openai request failed"}

    @pytest.mark.asyncio
    async def test_stateless_pipeline_propagates_errors(self, make_gateway, contact_schema):
        gateway = make_gateway(error=AIServiceError("down"))
        with pytest.raises(AIServiceError):
            await parse_speech_to_form("hi", contact_schema, gateway)


class TestValidate:
    def test_validate_uses_current_schema(self, make_gateway):
        session = FormFillSession(make_gateway())
        session.detect_form(FORM_HTML)
        assert session.validate({"firstName": "", "zip": "12345"}) == {"firstName": "firstName is required"}

    def test_validate_without_schema(self, make_gateway):
        assert FormFillSession(make_gateway()).validate({}) == {"general": "Form structure not initialized"}
