"""
Speech Router

Turns speech into form data.

Endpoints:
    POST /api/parse-speech - Map a transcript onto a form structure
    POST /api/speech-to-text - Transcribe an uploaded audio clip
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile
from pydantic import ValidationError

from config.constants import DEFAULT_AUDIO_FILENAME, DEFAULT_AUDIO_TYPE
from config.settings import settings
from core.dependencies import get_llm_gateway, get_rate_limit_store, get_transcriber
from core.schemas import ParseSpeechRequest, SpeechToTextResponse
from services.ai.gateway import LLMGateway
from services.form.filler import parse_speech_to_form
from services.form.schema import FormFillConfig, FormSchema, ReconciliationResult
from services.form.validator import schema_field_validator
from services.voice.transcriber import AudioUpload, Transcriber
from utils.exceptions import FormValidationError, TranscriptionError, VoiceFormError
from utils.logging import get_logger
from utils.rate_limit import RateLimitStore, enforce_rate_limit
from utils.sanitize import validate_audio_file, validate_form_structure, validate_text_input

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Speech"])


def _load_schema(payload) -> FormSchema:
    validate_form_structure(payload)
    try:
        return FormSchema.model_validate(payload)
    except ValidationError as e:
        raise FormValidationError(
            "Invalid form structure",
            field="formStructure",
            details={"errors": [err["msg"] for err in e.errors()]}
        )


# =============================================================================
# Transcript Parsing
# =============================================================================

@router.post(
    "/parse-speech",
    response_model=ReconciliationResult,
    summary="Parse a transcript into form data",
    responses={
        400: {"description": "Invalid text or form structure"},
        429: {"description": "Rate limit exceeded"},
        503: {"description": "No LLM provider configured"},
    }
)
async def parse_speech(
    body: ParseSpeechRequest,
    request: Request,
    response: Response,
    store: RateLimitStore = Depends(get_rate_limit_store),
    gateway: LLMGateway = Depends(get_llm_gateway)
):
    """
    Extract field values for ``formStructure`` from a speech transcript.

    Returns:
        dict: success, data, errors and updatedFields
    """
    rate = await enforce_rate_limit(
        request, store, settings.PARSE_RATE_LIMIT, settings.RATE_LIMIT_WINDOW_SECONDS
    )
    response.headers.update(rate.to_headers())

    text = validate_text_input(body.text)
    schema = _load_schema(body.form_structure)

    config = FormFillConfig(validate_field=schema_field_validator(schema))

    try:
        return await parse_speech_to_form(text, schema, gateway, config)
    except Exception as e:
        # Provider details stay in the logs
        logger.error(f"Speech parsing failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to parse speech")


# =============================================================================
# Speech-to-Text
# =============================================================================

@router.post(
    "/speech-to-text",
    response_model=SpeechToTextResponse,
    summary="Transcribe audio to text",
    responses={
        400: {"description": "Missing, oversized or unsupported audio"},
        429: {"description": "Rate limit exceeded"},
        503: {"description": "No speech-to-text provider configured"},
    }
)
async def speech_to_text(
    request: Request,
    response: Response,
    file: Optional[UploadFile] = File(None, description="Recorded audio clip"),
    store: RateLimitStore = Depends(get_rate_limit_store),
    transcriber: Transcriber = Depends(get_transcriber)
):
    """
    Transcribe one uploaded clip with the registered provider.

    Transcripts that look like background noise come back as "".
    """
    rate = await enforce_rate_limit(
        request, store, settings.SPEECH_RATE_LIMIT, settings.RATE_LIMIT_WINDOW_SECONDS
    )
    response.headers.update(rate.to_headers())

    data = await file.read() if file is not None else None
    content_type = file.content_type if file is not None else None
    validate_audio_file(data, content_type)

    audio = AudioUpload(
        data=data,
        content_type=content_type or DEFAULT_AUDIO_TYPE,
        filename=(file.filename if file is not None else None) or DEFAULT_AUDIO_FILENAME,
    )
    logger.info(f"Transcribing audio: {audio.size} bytes, type: {audio.content_type}")

    try:
        text = await transcriber.transcribe(audio)
    except VoiceFormError:
        raise
    except Exception as e:
        # Provider details stay in the logs
        logger.error(f"Speech-to-text failed: {e}", exc_info=True)
        raise TranscriptionError("Failed to process speech-to-text", provider=transcriber.provider)

    return SpeechToTextResponse(text=text or "")
