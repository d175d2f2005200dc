"""
Status Router

Endpoints:
    GET /api/llm-status - Configured LLM providers and the one in use
"""

from fastapi import APIRouter

from config.settings import get_settings
from core.schemas import LLMStatusResponse
from services.ai.gateway import check_llm_status

router = APIRouter(prefix="/api", tags=["Status"])


@router.get(
    "/llm-status",
    response_model=LLMStatusResponse,
    response_model_by_alias=True,
    summary="LLM provider status",
)
async def llm_status():
    """Report which provider keys are set and which provider/model would be used."""
    return check_llm_status(get_settings())
