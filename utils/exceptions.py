"""
Custom Exceptions Module

Defines application-specific exceptions for clearer error handling.
All exceptions inherit from a base VoiceFormError for easy catching.

Schema-level and parse-level failures are raised to the caller.
Field-scoped failures (transforms, validators) are collected into
result mappings and never raised out of reconciliation.

Usage:
    from utils.exceptions import SchemaError, LLMResponseParseError

    try:
        payload = parse_llm_response(raw_text)
    except LLMResponseParseError as e:
        logger.error(f"Parsing failed: {e}")
"""

from typing import Optional, Dict, Any


class VoiceFormError(Exception):
    """
    Base exception for all Voice Form Kit errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details (optional)
        status_code: HTTP status code to return (optional)
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


# =============================================================================
# Form Schema Exceptions
# =============================================================================

class SchemaError(VoiceFormError):
    """
    Raised when no usable form schema is available.

    Common causes:
        - No <form> element in the inspected document
        - Form has no named input-like controls
        - Transcript processed before a schema was set
    """

    def __init__(
        self,
        message: str = "Form structure is required",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details=details,
            status_code=400
        )


class FormValidationError(VoiceFormError):
    """
    Raised when request input fails validation.

    Common causes:
        - Empty or oversized transcript
        - Malformed form structure
        - Unsupported audio upload
        - Unsafe URL
    """

    def __init__(
        self,
        message: str = "Input validation failed",
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 400
    ):
        super().__init__(
            message=message,
            details={"field": field, **(details or {})},
            status_code=status_code
        )


class FieldTransformError(VoiceFormError):
    """
    A per-field transform failed.

    Scoped to one field; the reconciler records it in the result's
    errors mapping instead of raising.
    """

    def __init__(
        self,
        field: str,
        message: str = "Transform error",
        details: Optional[Dict[str, Any]] = None
    ):
        self.field = field
        super().__init__(
            message=message,
            details={"field": field, **(details or {})},
            status_code=422
        )


# =============================================================================
# AI/LLM Exceptions
# =============================================================================

class LLMResponseParseError(VoiceFormError):
    """
    Raised when the language model's answer is not a JSON object.

    Common causes:
        - Model wrapped the JSON in prose
        - Truncated output
        - Top-level array or scalar instead of an object
    """

    def __init__(
        self,
        message: str = "Failed to parse LLM response as JSON",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details=details,
            status_code=502
        )


class ProviderNotConfiguredError(VoiceFormError):
    """
    Raised when no LLM gateway or transcriber has been wired in.
    """

    def __init__(
        self,
        message: str = "No valid LLM provider configured",
        service: str = "llm",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"service": service, **(details or {})},
            status_code=503
        )


class AIServiceError(VoiceFormError):
    """
    Raised when a gateway call fails.

    Common causes:
        - Provider API error
        - Invalid API key
        - Timeout
    """

    def __init__(
        self,
        message: str = "AI service error",
        service: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"service": service, **(details or {})},
            status_code=502
        )


# =============================================================================
# Voice/Speech Exceptions
# =============================================================================

class TranscriptionError(VoiceFormError):
    """
    Raised when speech-to-text fails.

    Common causes:
        - Provider API error
        - Unreadable audio payload
    """

    def __init__(
        self,
        message: str = "Failed to transcribe audio",
        provider: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"provider": provider, **(details or {})},
            status_code=502
        )


# =============================================================================
# Rate Limiting
# =============================================================================

class RateLimitExceededError(VoiceFormError):
    """
    Raised when a client exceeds its request window.
    """

    def __init__(
        self,
        message: str = "Too many requests. Please try again later.",
        retry_after: int = 60,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        self.retry_after = retry_after
        self.headers = headers or {"Retry-After": str(retry_after)}
        super().__init__(
            message=message,
            details={"retry_after": retry_after, **(details or {})},
            status_code=429
        )
