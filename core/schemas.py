"""
API Schemas

Request and response bodies of the HTTP layer. Field contents are checked
by utils.sanitize inside the routers, so request models stay permissive
and report problems through FormValidationError.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ParseSpeechRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[Any] = None
    form_structure: Optional[Any] = Field(default=None, alias="formStructure")


class SpeechToTextResponse(BaseModel):
    text: str


class DetectFormRequest(BaseModel):
    """Either raw HTML or a page URL to fetch."""
    html: Optional[str] = None
    url: Optional[str] = None


class ProviderFlags(BaseModel):
    openai: bool = False
    anthropic: bool = False
    together: bool = False


class LLMStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    has_api_key: bool = Field(alias="hasApiKey")
    selected_provider: str = Field(alias="selectedProvider")
    selected_model: str = Field(alias="selectedModel")
    configuration: Dict[str, str]
    providers: ProviderFlags


class HealthResponse(BaseModel):
    status: str
    version: str
    llm_configured: bool
    speech_configured: bool
    speech_provider: str
