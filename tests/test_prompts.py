"""
Unit Tests for Prompt Generation

Tests the system prompt field listing and transcript embedding.
"""

from services.ai.prompts.form_prompts import (
    build_prompts,
    describe_field,
    generate_client_prompt,
    generate_system_prompt,
)
from services.form.schema import FormField, FormSchema


class TestFieldLines:
    """Tests for single field annotations."""

    def test_full_annotation(self):
        """All attributes appear in a fixed order."""
        field = FormField(
            name="zip",
            label="ZIP",
            placeholder="12345",
            type="text",
            required=True,
            pattern="^[0-9]{5}$",
            min_length=5,
            max_length=5,
        )
        assert describe_field(field) == (
            '**zip** (Label: "ZIP") (Placeholder: "12345") - Type: text [REQUIRED]'
            ' (Pattern: ^[0-9]{5}$) (Length: 5-5)'
        )

    def test_options_and_open_length(self):
        """Options are comma separated; a missing max length reads 'unlimited'."""
        field = FormField(name="size", type="select", options=["S", "M"], min_length=1)
        assert describe_field(field) == "**size** - Type: select (Options: S, M) (Length: 1-unlimited)"


class TestSystemPrompt:
    """Tests for the full system prompt."""

    def test_title_and_sections(self, contact_schema):
        """Title line and all instruction blocks are present."""
        prompt = generate_system_prompt(contact_schema)

        assert 'The form is titled "Contact".' in prompt
        assert "CRITICAL REQUIREMENTS:" in prompt
        assert "FORM FIELDS TO EXTRACT:" in prompt
        assert "PARSING RULES:" in prompt
        assert "NUMBER CONSOLIDATION RULES:" in prompt
        assert prompt.endswith("Remember: Return ONLY the JSON object, nothing else.")

    def test_untitled_form(self):
        """No title line without a form name."""
        prompt = generate_system_prompt(FormSchema(fields=[FormField(name="a")]))
        assert "titled" not in prompt

    def test_nested_numbering_and_indent(self, contact_schema):
        """Children are numbered by parent path and indented one level."""
        prompt = generate_system_prompt(contact_schema)

        assert '\n1. **firstName** (Label: "First Name") - Type: text [REQUIRED]' in prompt
        assert "\n2. **email** - Type: email" in prompt
        assert "\n3. **address** - Type: nested\n   Contains nested fields:" in prompt
        assert "\n  3.1. **city** - Type: text" in prompt
        assert "\n  3.2. **zip** - Type: text (Pattern: ^[0-9]{5}$)" in prompt

    def test_deterministic(self, contact_schema):
        """Same schema, same prompt."""
        assert generate_system_prompt(contact_schema) == generate_system_prompt(contact_schema)


class TestClientPrompt:
    """Tests for transcript embedding."""

    def test_transcript_quoted(self):
        """The transcript appears inside the Speech transcript line."""
        prompt = generate_client_prompt("my name is Jane")
        assert 'Speech transcript: "my name is Jane"' in prompt
        assert prompt.startswith("Extract personal information from this speech transcript")

    def test_build_prompts_preprocesses_and_sanitizes(self, contact_schema):
        """Digit words become digits and JSON characters are stripped."""
        system, user = build_prompts(contact_schema, '  zip is {seven} five "two"  ')
        assert system == generate_system_prompt(contact_schema)
        assert "Speech transcript: \"zip is 7 5 '2'\"" in user
