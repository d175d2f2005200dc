"""
Speech-to-Text Capability

Interface for turning recorded audio into a transcript, plus the noise
filter applied to every provider's output.

Concrete providers (ElevenLabs, Whisper, ...) implement Transcriber and are
wired in by the deployer through core.dependencies.

Usage:
    from services.voice.transcriber import AudioUpload, Transcriber

    class MyTranscriber(Transcriber):
        provider = "whisper"

        async def transcribe(self, audio: AudioUpload) -> str:
            result = await client.transcribe(audio.data)
            return filter_noise_transcript(result.text, result.language_probability)
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from config.constants import (
    DEFAULT_AUDIO_FILENAME,
    DEFAULT_AUDIO_TYPE,
    NOISE_LANGUAGE_PROBABILITY,
    NOISE_MIN_TEXT_LENGTH,
    NOISE_MIN_WORD_CHARS,
)
from utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AudioUpload:
    """One recorded clip as received from the client."""
    data: bytes
    content_type: str = DEFAULT_AUDIO_TYPE
    filename: str = DEFAULT_AUDIO_FILENAME

    @property
    def size(self) -> int:
        return len(self.data)


class Transcriber(ABC):
    """Speech-to-text provider."""

    provider: str = "unknown"

    @abstractmethod
    async def transcribe(self, audio: AudioUpload) -> str:
        """
        Transcribe one clip.

        Returns:
            The transcript, or "" when nothing usable was heard

        Raises:
            TranscriptionError: If the provider call fails
        """


def filter_noise_transcript(text: Optional[str], language_probability: Optional[float] = None) -> str:
    """
    Drop transcripts that are most likely background noise.

    A transcript is discarded when the provider's language probability is
    below 0.3, when it is shorter than 3 characters, or when fewer than 2
    word characters remain after removing punctuation.

    Args:
        text: Raw provider transcript
        language_probability: Provider's language detection confidence,
            if it reports one

    Returns:
        The transcript unchanged, or ""
    """
    text = text or ""

    if language_probability is not None and language_probability < NOISE_LANGUAGE_PROBABILITY:
        logger.debug(f"Dropping transcript: language probability {language_probability:.2f}")
        return ""

    if len(text) < NOISE_MIN_TEXT_LENGTH:
        return ""

    if len(re.sub(r"[^\w\s]", "", text).strip()) < NOISE_MIN_WORD_CHARS:
        logger.debug("Dropping transcript: mostly punctuation")
        return ""

    return text
