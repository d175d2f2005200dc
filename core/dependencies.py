"""
FastAPI Dependencies Module

Provides dependency injection for the pluggable capabilities and shared
state. Everything here is a process-wide singleton.

The language-model gateway and the transcriber are not built from
settings: the deployer registers concrete implementations at startup
(or tests override the providers through ``app.dependency_overrides``).

Usage:
    from core.dependencies import get_llm_gateway, set_llm_gateway

    set_llm_gateway(LangChainGateway(ChatAnthropic(...), provider="anthropic"))

    @router.post("/parse")
    async def parse(gateway: LLMGateway = Depends(get_llm_gateway)):
        ...
"""

from typing import Optional

from services.ai.gateway import LLMGateway
from services.voice.transcriber import Transcriber
from utils.exceptions import ProviderNotConfiguredError
from utils.logging import get_logger
from utils.rate_limit import RateLimitStore

logger = get_logger(__name__)

_rate_limit_store: Optional[RateLimitStore] = None
_llm_gateway: Optional[LLMGateway] = None
_transcriber: Optional[Transcriber] = None


# =============================================================================
# Rate Limiting
# =============================================================================

def get_rate_limit_store() -> RateLimitStore:
    """
    Get the RateLimitStore singleton.

    Returns:
        RateLimitStore: Shared in-memory store for all routes
    """
    global _rate_limit_store
    if _rate_limit_store is None:
        _rate_limit_store = RateLimitStore()
    return _rate_limit_store


# =============================================================================
# Capability Registration
# =============================================================================

def set_llm_gateway(gateway: Optional[LLMGateway]) -> None:
    """Register (or with None, remove) the language-model gateway."""
    global _llm_gateway
    _llm_gateway = gateway
    if gateway is not None:
        logger.info(f"LLM gateway registered: {gateway.provider}/{gateway.model}")


def set_transcriber(transcriber: Optional[Transcriber]) -> None:
    """Register (or with None, remove) the speech-to-text provider."""
    global _transcriber
    _transcriber = transcriber
    if transcriber is not None:
        logger.info(f"Transcriber registered: {transcriber.provider}")


def get_llm_gateway() -> LLMGateway:
    """
    Get the registered LLMGateway.

    Raises:
        ProviderNotConfiguredError: If no gateway has been registered
    """
    if _llm_gateway is None:
        raise ProviderNotConfiguredError("No valid LLM provider configured", service="llm")
    return _llm_gateway


def get_transcriber() -> Transcriber:
    """
    Get the registered Transcriber.

    Raises:
        ProviderNotConfiguredError: If no transcriber has been registered
    """
    if _transcriber is None:
        raise ProviderNotConfiguredError("Speech-to-text provider not configured", service="speech")
    return _transcriber


def is_llm_configured() -> bool:
    return _llm_gateway is not None


def is_transcriber_configured() -> bool:
    return _transcriber is not None
