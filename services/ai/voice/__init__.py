"""
Voice Package

Transcript normalization before prompting.
"""

from services.ai.voice.preprocessor import DIGIT_WORDS, preprocess_speech_text

__all__ = [
    'DIGIT_WORDS',
    'preprocess_speech_text',
]
