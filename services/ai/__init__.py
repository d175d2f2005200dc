# AI services module

from .gateway import LLMGateway, LangChainGateway, LLMProvider, check_llm_status

__all__ = [
    "LLMGateway",
    "LangChainGateway",
    "LLMProvider",
    "check_llm_status",
]
