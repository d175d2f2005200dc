"""
Utilities Module

Provides shared utilities across the application:
- Logging configuration
- Custom exceptions
- Rate limiting
- Input sanitization
"""

from .logging import get_logger, setup_logging, log_api_call, log_fill_result
from .exceptions import (
    VoiceFormError,
    SchemaError,
    FormValidationError,
    FieldTransformError,
    LLMResponseParseError,
    ProviderNotConfiguredError,
    AIServiceError,
    TranscriptionError,
    RateLimitExceededError,
)
from .rate_limit import (
    RateLimitStore,
    RateLimitEntry,
    RateLimitResult,
    get_client_identifier,
    enforce_rate_limit,
)
from .sanitize import (
    sanitize_text_input,
    sanitize_for_prompt,
    validate_text_input,
    validate_audio_file,
    validate_form_structure,
    validate_form_url,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "log_api_call",
    "log_fill_result",
    # Exceptions
    "VoiceFormError",
    "SchemaError",
    "FormValidationError",
    "FieldTransformError",
    "LLMResponseParseError",
    "ProviderNotConfiguredError",
    "AIServiceError",
    "TranscriptionError",
    "RateLimitExceededError",
    # Rate Limiting
    "RateLimitStore",
    "RateLimitEntry",
    "RateLimitResult",
    "get_client_identifier",
    "enforce_rate_limit",
    # Sanitization
    "sanitize_text_input",
    "sanitize_for_prompt",
    "validate_text_input",
    "validate_audio_file",
    "validate_form_structure",
    "validate_form_url",
]
