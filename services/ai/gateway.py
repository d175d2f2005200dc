"""
LLM Gateway

The language-model capability used by the fill pipeline: given a system
prompt and a user prompt, return the model's raw text.

Vendor selection belongs to the deployer. Any LangChain chat model
(ChatOpenAI, ChatAnthropic, ChatTogether, ...) can be wrapped with
LangChainGateway; tests use small in-process fakes.

Usage:
    from langchain_openai import ChatOpenAI
    from services.ai.gateway import LangChainGateway

    gateway = LangChainGateway(ChatOpenAI(model="gpt-3.5-turbo"), provider="openai")
    text = await gateway.complete(system_prompt, user_prompt)
"""

import asyncio
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from config.constants import DEFAULT_PROVIDER_MODELS, PROVIDER_DISPLAY_NAMES, PROVIDER_PRIORITY
from config.settings import Settings, settings as default_settings
from utils.exceptions import AIServiceError
from utils.logging import get_logger, log_api_call

logger = get_logger(__name__)


class LLMProvider(str, Enum):
    """Known language-model vendors."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    TOGETHER = "together"


# =============================================================================
# Gateway Interface
# =============================================================================

class LLMGateway(ABC):
    """Turns a (system, user) prompt pair into raw model text."""

    provider: str = "unknown"
    model: str = "unknown"

    @abstractmethod
    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Run one completion.

        Raises:
            AIServiceError: If the provider call fails
        """


class LangChainGateway(LLMGateway):
    """
    LLMGateway backed by a LangChain chat model.

    Attributes:
        llm: The wrapped chat model
        timeout: Per-call timeout in seconds (None disables it)
    """

    def __init__(
        self,
        chat_model: BaseChatModel,
        provider: str = "unknown",
        model: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.llm = chat_model
        self.provider = provider
        self.model = model or getattr(chat_model, "model_name", None) or getattr(chat_model, "model", None) or "unknown"
        self.timeout = timeout if timeout is not None else default_settings.LLM_TIMEOUT_SECONDS

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt),
        ]

        start = time.perf_counter()
        try:
            if self.timeout:
                response = await asyncio.wait_for(self.llm.ainvoke(messages), timeout=self.timeout)
            else:
                response = await self.llm.ainvoke(messages)
        except asyncio.TimeoutError:
            duration = (time.perf_counter() - start) * 1000
            log_api_call(self.provider, self.model, success=False, duration_ms=duration, error="timeout")
            raise AIServiceError(f"{self.provider} request timed out", service=self.provider)
        except Exception as e:
            duration = (time.perf_counter() - start) * 1000
            log_api_call(self.provider, self.model, success=False, duration_ms=duration, error=str(e))
            raise AIServiceError(f"{self.provider} request failed", service=self.provider, details={"reason": str(e)})

        duration = (time.perf_counter() - start) * 1000
        log_api_call(self.provider, self.model, success=True, duration_ms=duration)

        content = response.content
        if isinstance(content, list):
            # Multi-part messages: keep the text blocks
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part)
                for part in content
            )
        return content or ""


# =============================================================================
# Provider Status
# =============================================================================

def _provider_keys(config: Settings) -> Dict[str, bool]:
    return {
        LLMProvider.OPENAI.value: bool(config.OPENAI_API_KEY),
        LLMProvider.ANTHROPIC.value: bool(config.ANTHROPIC_API_KEY),
        LLMProvider.TOGETHER.value: bool(config.TOGETHER_API_KEY),
    }


def select_provider(config: Settings) -> Optional[str]:
    """
    Provider that would serve requests under ``config``.

    An explicit LLM_PROVIDER is only honored when its key is set; "auto"
    prefers Anthropic, then OpenAI, then Together.ai.
    """
    available = _provider_keys(config)
    preferred = (config.LLM_PROVIDER or "auto").lower()

    if preferred != "auto":
        return preferred if available.get(preferred) else None

    for provider in PROVIDER_PRIORITY:
        if available[provider]:
            return provider
    return None


def check_llm_status(config: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Describe configured providers and the provider/model in use.

    Returns:
        Dict with status, hasApiKey, selectedProvider, selectedModel,
        configuration and providers
    """
    config = config or default_settings
    providers = _provider_keys(config)
    has_api_key = any(providers.values())

    selected_provider = select_provider(config)
    if selected_provider is None:
        selected_provider, selected_model = "none", "none"
    elif config.LLM_MODEL and config.LLM_MODEL != "auto":
        selected_model = config.LLM_MODEL
    else:
        selected_model = DEFAULT_PROVIDER_MODELS[selected_provider]

    configured = [
        PROVIDER_DISPLAY_NAMES[name]
        for name in (LLMProvider.OPENAI.value, LLMProvider.ANTHROPIC.value, LLMProvider.TOGETHER.value)
        if providers[name]
    ]
    if len(configured) > 1:
        status = f"{' & '.join(configured)} configured (using {selected_provider})"
    elif configured:
        status = f"{configured[0]} configured"
    else:
        status = "Not configured"

    return {
        "status": status,
        "hasApiKey": has_api_key,
        "selectedProvider": selected_provider,
        "selectedModel": selected_model,
        "configuration": {
            "provider": config.LLM_PROVIDER or "auto",
            "model": config.LLM_MODEL or "auto",
        },
        "providers": providers,
    }
