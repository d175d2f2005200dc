"""
Input Sanitization Utilities

Validation and sanitization for request inputs: transcripts, audio uploads,
form structures and form URLs. Prompt sanitization strips characters that
could break the JSON-producing prompt the transcript is embedded into.

Usage:
    from utils.sanitize import validate_text_input, sanitize_for_prompt

    text = validate_text_input(body.text)
    safe = sanitize_for_prompt(text)
"""

import ipaddress
import re
import socket
from urllib.parse import urlparse
from typing import Any, Optional, Union

from config.constants import ALLOWED_AUDIO_TYPES
from config.settings import settings
from utils.logging import get_logger
from utils.exceptions import FormValidationError

logger = get_logger(__name__)


# =============================================================================
# Transcript Sanitization
# =============================================================================

# JSON structural characters removed before prompting
PROMPT_STRIP_PATTERN = re.compile(r'[{}\[\]\\]')


def sanitize_text_input(text: str, max_length: Optional[int] = None) -> str:
    """
    Strip markup and script-like protocols from free text.

    Args:
        text: Raw user text
        max_length: Truncation limit (defaults to MAX_TEXT_INPUT_LENGTH)

    Returns:
        str: Sanitized text
    """
    if not text:
        return ""

    limit = max_length or settings.MAX_TEXT_INPUT_LENGTH
    cleaned = text.strip()
    cleaned = re.sub(r'[<>]', '', cleaned)
    cleaned = re.sub(r'javascript:', '', cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r'data:', '', cleaned, flags=re.IGNORECASE)
    return cleaned[:limit]


def validate_text_input(text: Any) -> str:
    """
    Validate a transcript submitted for speech parsing.

    Args:
        text: Value from the request body

    Returns:
        str: Sanitized transcript

    Raises:
        FormValidationError: If text is missing or empty
    """
    if not text or not isinstance(text, str):
        raise FormValidationError("Valid text input is required", field="text")

    # Over-long transcripts are truncated to MAX_TEXT_INPUT_LENGTH, not rejected
    sanitized = sanitize_text_input(text)
    if not sanitized:
        raise FormValidationError("Text input is empty after sanitization", field="text")

    return sanitized


def sanitize_for_prompt(text: str, max_length: Optional[int] = None) -> str:
    """
    Make a transcript safe to embed inside a quoted prompt string.

    Removes { } [ ] and backslashes, turns double quotes into single
    quotes and truncates to MAX_PROMPT_TRANSCRIPT_LENGTH.
    """
    if not text:
        return ""

    limit = max_length or settings.MAX_PROMPT_TRANSCRIPT_LENGTH
    cleaned = PROMPT_STRIP_PATTERN.sub('', text)
    cleaned = cleaned.replace('"', "'")
    return cleaned[:limit]


# =============================================================================
# Audio Validation
# =============================================================================

def validate_audio_file(data: Optional[bytes], content_type: Optional[str] = None) -> None:
    """
    Validate an uploaded audio payload.

    Args:
        data: Raw audio bytes
        content_type: Declared MIME type (optional)

    Raises:
        FormValidationError: If the file is missing, too large or of an
            unsupported type
    """
    if not data:
        raise FormValidationError("Audio file is required", field="file")

    max_bytes = settings.MAX_AUDIO_BYTES
    if len(data) > max_bytes:
        raise FormValidationError(
            f"Audio file too large (max {max_bytes // (1024 * 1024)}MB)",
            field="file"
        )

    if content_type:
        # Browsers append codec parameters: "audio/webm;codecs=opus"
        base_type = content_type.split(";")[0].strip().lower()
        if base_type not in ALLOWED_AUDIO_TYPES:
            raise FormValidationError(
                f"Unsupported audio format. Allowed: {', '.join(ALLOWED_AUDIO_TYPES)}",
                field="file"
            )


# =============================================================================
# Form Structure Validation
# =============================================================================

def validate_form_structure(form_structure: Any) -> None:
    """
    Shallow validation of a client-supplied form structure payload.

    Raises:
        FormValidationError: If the payload lacks a non-empty fields list or
            any top-level field lacks a string name
    """
    if not form_structure:
        raise FormValidationError("Form structure is required", field="formStructure")

    fields = form_structure.get("fields") if isinstance(form_structure, dict) else None
    if not isinstance(fields, list):
        raise FormValidationError(
            "Form structure must have a fields array",
            field="formStructure"
        )

    if not fields:
        raise FormValidationError(
            "Form structure must have at least one field",
            field="formStructure"
        )

    for field in fields:
        name = field.get("name") if isinstance(field, dict) else None
        if not name or not isinstance(name, str):
            raise FormValidationError(
                "Each field must have a valid name",
                field="formStructure"
            )


# =============================================================================
# URL Validation
# =============================================================================

ALLOWED_SCHEMES = {"http", "https"}

# Blocked host names (prevent SSRF to internal services)
BLOCKED_HOSTS = {
    "localhost",
    "metadata.google.internal",  # GCP metadata
}

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def _host_address(hostname: str) -> Optional[IPAddress]:
    """Parse a URL host as an IP address, including short forms like 127.1."""
    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        try:
            address = ipaddress.IPv4Address(socket.inet_aton(hostname))
        except OSError:
            return None

    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        return address.ipv4_mapped
    return address


def _is_internal_address(address: IPAddress) -> bool:
    return (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_reserved
        or address.is_multicast
        or address.is_unspecified
    )


def validate_form_url(url: str) -> str:
    """
    Validate a URL before fetching it for form detection.

    Ensures the URL uses http(s), has a host, and does not point at
    loopback, link-local (cloud metadata) or private network addresses.
    Also applied to every redirect hop by the form fetcher.

    Returns:
        str: Validated URL

    Raises:
        FormValidationError: If URL is invalid or unsafe
    """
    if not url or not isinstance(url, str):
        raise FormValidationError("URL is required", field="url")

    url = url.strip()

    try:
        parsed = urlparse(url)
        hostname = (parsed.hostname or "").lower()
    except ValueError as e:
        raise FormValidationError(f"Invalid URL format: {e}", field="url")

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise FormValidationError(
            f"Invalid URL scheme: {parsed.scheme}. Use http or https.",
            field="url"
        )

    if not hostname:
        raise FormValidationError("URL must include a host", field="url")

    if hostname in BLOCKED_HOSTS or hostname.endswith(".localhost"):
        logger.warning(f"Blocked URL attempt: {url}")
        raise FormValidationError("This URL is not allowed", field="url")

    address = _host_address(hostname)
    if address is not None and _is_internal_address(address):
        logger.warning(f"Blocked private IP URL: {url}")
        raise FormValidationError(
            "Private/internal URLs are not allowed",
            field="url"
        )

    logger.debug(f"URL validated: {url[:50]}...")
    return url
