"""
Core Module

Provides API schemas and dependencies for the application.
"""

from .schemas import (
    ParseSpeechRequest,
    SpeechToTextResponse,
    DetectFormRequest,
    LLMStatusResponse,
    HealthResponse,
)
from .dependencies import (
    get_rate_limit_store,
    get_llm_gateway,
    get_transcriber,
    set_llm_gateway,
    set_transcriber,
)

__all__ = [
    # Schemas
    "ParseSpeechRequest",
    "SpeechToTextResponse",
    "DetectFormRequest",
    "LLMStatusResponse",
    "HealthResponse",
    # Dependencies
    "get_rate_limit_store",
    "get_llm_gateway",
    "get_transcriber",
    "set_llm_gateway",
    "set_transcriber",
]
