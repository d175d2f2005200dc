"""
Test Configuration

Pytest configuration and shared fixtures for all tests.
"""

import json
import pytest
from typing import AsyncGenerator, List, Optional, Tuple
from httpx import AsyncClient, ASGITransport

from services.ai.gateway import LLMGateway
from services.form.schema import FormSchema
from services.voice.transcriber import AudioUpload, Transcriber


# =============================================================================
# Capability Fakes
# =============================================================================

class FakeGateway(LLMGateway):
    """Returns a canned response and records every prompt pair."""

    provider = "fake"
    model = "fake-model"

    def __init__(self, response: str = "{}", error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.response


class FakeTranscriber(Transcriber):
    """Returns a fixed transcript and records received clips."""

    provider = "fake"

    def __init__(self, text: str = "hello world", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.received: List[AudioUpload] = []

    async def transcribe(self, audio: AudioUpload) -> str:
        self.received.append(audio)
        if self.error is not None:
            raise self.error
        return self.text


# =============================================================================
# Sample Data
# =============================================================================

@pytest.fixture
def contact_form_payload():
    """Wire-format form structure with a nested address group."""
    return {
        "formName": "Contact",
        "fields": [
            {"name": "firstName", "type": "text", "label": "First Name", "required": True},
            {"name": "email", "type": "email"},
            {
                "name": "address",
                "nested": [
                    {"name": "city", "type": "text"},
                    {"name": "zip", "type": "text", "pattern": "^[0-9]{5}$"},
                ],
            },
        ],
    }


@pytest.fixture
def contact_schema(contact_form_payload) -> FormSchema:
    return FormSchema.model_validate(contact_form_payload)


@pytest.fixture
def fake_gateway():
    return FakeGateway(response=json.dumps({"firstName": "Jane", "email": "jane@example.com"}))


@pytest.fixture
def fake_transcriber():
    return FakeTranscriber()


# =============================================================================
# API Client
# =============================================================================

@pytest.fixture
async def client(fake_gateway, fake_transcriber) -> AsyncGenerator[AsyncClient, None]:
    """Async test client with fake capabilities and a fresh rate limit store."""
    from main import app
    from core.dependencies import get_llm_gateway, get_rate_limit_store, get_transcriber
    from utils.rate_limit import RateLimitStore

    store = RateLimitStore()
    app.dependency_overrides[get_llm_gateway] = lambda: fake_gateway
    app.dependency_overrides[get_transcriber] = lambda: fake_transcriber
    app.dependency_overrides[get_rate_limit_store] = lambda: store

    transport = ASGITransport(app=app)

    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_gateway():
    """Factory for FakeGateway instances with custom responses or errors."""
    return FakeGateway
