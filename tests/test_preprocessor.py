"""
Unit Tests for Speech Preprocessing

Tests digit-word replacement on raw transcripts.
"""

import pytest

from services.ai.voice.preprocessor import preprocess_speech_text


class TestDigitWords:
    """Tests for single-digit replacement."""

    def test_spoken_zip_code(self):
        """Each spoken digit becomes a digit, spacing preserved."""
        assert preprocess_speech_text("seven five two four one") == "7 5 2 4 1"

    def test_compound_numbers_untouched(self):
        """Tens and teens are left for the model."""
        assert preprocess_speech_text("twenty") == "twenty"
        assert preprocess_speech_text("nineteen sixty eight") == "nineteen sixty 8"

    def test_case_insensitive(self):
        """Capitalized digit words are replaced too."""
        assert preprocess_speech_text("Zero ONE two") == "0 1 2"

    def test_whole_words_only(self):
        """Digit names inside other words are kept."""
        assert preprocess_speech_text("someone often tone") == "someone often tone"

    def test_trims(self):
        """Surrounding whitespace is removed."""
        assert preprocess_speech_text("  call me at nine  ") == "call me at 9"

    @pytest.mark.parametrize("value", ["", None])
    def test_empty_input(self, value):
        """Empty input yields an empty string."""
        assert preprocess_speech_text(value) == ""
