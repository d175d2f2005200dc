"""
Unit Tests for Input Sanitization

Tests for transcript, audio, form structure and URL validation.
"""

import pytest
from utils.sanitize import (
    sanitize_for_prompt,
    sanitize_text_input,
    validate_audio_file,
    validate_form_structure,
    validate_form_url,
    validate_text_input,
)
from utils.exceptions import FormValidationError


class TestTextInput:
    """Tests for transcript validation."""

    def test_markup_and_protocols_removed(self):
        """Angle brackets and script-like protocols are stripped."""
        assert sanitize_text_input(" <b>hi</b> javascript:alert(1) data:x ") == "bhi/b alert(1) x"

    def test_valid_text_returned_sanitized(self):
        """Valid text passes through sanitization."""
        assert validate_text_input("my name is <Jane>") == "my name is Jane"

    @pytest.mark.parametrize("value", [None, "", 42, ["text"]])
    def test_missing_or_non_string(self, value):
        """Missing or non-string text is rejected."""
        with pytest.raises(FormValidationError) as exc_info:
            validate_text_input(value)
        assert exc_info.value.message == "Valid text input is required"

    def test_too_long_truncated(self):
        """Text over the limit is cut to 10,000 characters instead of rejected."""
        assert validate_text_input("a" * 12000) == "a" * 10000

    def test_empty_after_sanitization(self):
        """Text consisting only of stripped characters is rejected."""
        with pytest.raises(FormValidationError):
            validate_text_input("<<>>")


class TestPromptSanitization:
    """Tests for prompt-safe transcripts."""

    def test_json_characters_removed(self):
        """Braces, brackets and backslashes are removed; quotes become single quotes."""
        assert sanitize_for_prompt('say "hi" {x} [y] a\\b') == "say 'hi' x y ab"

    def test_truncated(self):
        """Transcripts are capped at 5000 characters."""
        assert len(sanitize_for_prompt("a" * 6000)) == 5000


class TestAudioValidation:
    """Tests for uploaded audio checks."""

    def test_accepts_codec_parameters(self):
        """Codec suffixes on the MIME type are ignored."""
        validate_audio_file(b"\x00\x01", "audio/webm;codecs=opus")

    def test_missing_file(self):
        """Empty payloads are rejected."""
        with pytest.raises(FormValidationError):
            validate_audio_file(b"", "audio/wav")

    def test_unsupported_type(self):
        """Non-audio types are rejected."""
        with pytest.raises(FormValidationError):
            validate_audio_file(b"\x00", "video/avi")

    def test_too_large(self):
        """Files over 25MB are rejected."""
        with pytest.raises(FormValidationError):
            validate_audio_file(b"\x00" * (25 * 1024 * 1024 + 1), "audio/wav")


class TestFormStructureValidation:
    """Tests for client-supplied form structures."""

    def test_valid(self, contact_form_payload):
        """A well-formed structure passes."""
        validate_form_structure(contact_form_payload)

    @pytest.mark.parametrize("payload", [
        None,
        {},
        {"fields": "nope"},
        {"fields": []},
        {"fields": [{"type": "text"}]},
        {"fields": [{"name": 3}]},
    ])
    def test_invalid(self, payload):
        """Missing fields, empty lists and unnamed fields are rejected."""
        with pytest.raises(FormValidationError):
            validate_form_structure(payload)


class TestURLValidation:
    """Tests for URL validation and sanitization."""

    def test_valid_https_url(self):
        """Valid HTTPS URL should pass validation."""
        url = "https://example.com/form"
        assert validate_form_url(url) == url

    def test_strips_whitespace(self):
        """URL with whitespace should be stripped."""
        assert validate_form_url("  https://example.com/form  ") == "https://example.com/form"

    def test_invalid_scheme_raises_error(self):
        """Invalid scheme (ftp, file) should raise error."""
        with pytest.raises(FormValidationError):
            validate_form_url("ftp://example.com/form")

        with pytest.raises(FormValidationError):
            validate_form_url("file:///etc/passwd")

    def test_localhost_blocked(self):
        """localhost URLs should be blocked (SSRF protection)."""
        with pytest.raises(FormValidationError):
            validate_form_url("http://localhost:8000/admin")

        with pytest.raises(FormValidationError):
            validate_form_url("http://127.0.0.1:8000/admin")

    def test_private_ip_blocked(self):
        """Private IP addresses should be blocked."""
        with pytest.raises(FormValidationError):
            validate_form_url("http://192.168.1.1/form")

        with pytest.raises(FormValidationError):
            validate_form_url("http://10.0.0.1/form")

    @pytest.mark.parametrize("url", [
        "http://127.1/admin",
        "http://2130706433/admin",
        "http://0x7f.0.0.1/admin",
        "http://[::ffff:127.0.0.1]/admin",
        "http://[::1]/admin",
        "http://169.254.169.254/latest/meta-data",
        "http://0.0.0.0/",
        "http://172.20.1.1/form",
        "http://app.localhost/",
    ])
    def test_alternate_internal_forms_blocked(self, url):
        """Short, numeric and IPv4-mapped spellings of internal hosts are blocked."""
        with pytest.raises(FormValidationError):
            validate_form_url(url)

    def test_public_ip_allowed(self):
        assert validate_form_url("http://93.184.216.34/form") == "http://93.184.216.34/form"

    def test_empty_url_raises_error(self):
        """Empty URL should raise error."""
        with pytest.raises(FormValidationError):
            validate_form_url("")

        with pytest.raises(FormValidationError):
            validate_form_url(None)
