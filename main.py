"""
Voice Form Kit - Backend Application

FastAPI application for voice-driven form filling.
Turns speech into structured, validated data for a described HTML form.

Features:
    - Form structure detection from HTML or a URL
    - Speech-to-text through a pluggable transcriber
    - Transcript-to-form extraction through a pluggable LLM gateway
    - Per-client fixed-window rate limiting

Run:
    python main.py
    # or
    uvicorn main:app --reload
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from config.settings import settings
from core.dependencies import is_llm_configured, is_transcriber_configured
from core.schemas import HealthResponse
from utils.logging import setup_logging, get_logger
from utils.exceptions import VoiceFormError, RateLimitExceededError

# Import Routers
from routers import forms, speech, status

# Initialize logging
setup_logging()
logger = get_logger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Logs startup configuration. Capabilities are registered by the
    deployer through core.dependencies before serving traffic.
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    if not is_llm_configured():
        logger.warning("No LLM gateway registered - /api/parse-speech will return 503")
    if not is_transcriber_configured():
        logger.warning("No transcriber registered - /api/speech-to-text will return 503")

    yield

    logger.info("Shutting down application")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    description="Voice-driven form filling API",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# =============================================================================
# Middleware
# =============================================================================

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(VoiceFormError)
async def voiceform_exception_handler(request: Request, exc: VoiceFormError):
    """
    Handle custom Voice Form Kit exceptions.

    Returns standardized error response with appropriate status code.
    Rate limit errors carry Retry-After and X-RateLimit-* headers.
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__}: {exc.message}", extra={"details": exc.details})
    else:
        logger.warning(f"{exc.__class__.__name__}: {exc.message}")

    headers = exc.headers if isinstance(exc, RateLimitExceededError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(forms.router)
app.include_router(speech.router)
app.include_router(status.router)


# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint - basic health check.

    Returns:
        dict: Simple status message
    """
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION
    }


@app.get("/health", tags=["Health"], response_model=HealthResponse)
async def health_check():
    """
    Detailed health check endpoint.

    Reports whether the LLM gateway and the transcriber are registered.
    """
    llm_ready = is_llm_configured()
    return HealthResponse(
        status="healthy" if llm_ready else "degraded",
        version=settings.APP_VERSION,
        llm_configured=llm_ready,
        speech_configured=is_transcriber_configured(),
        speech_provider=settings.SPEECH_PROVIDER,
    )


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
