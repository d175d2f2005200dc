"""
Speech Preprocessor

Normalizes a raw transcript before it is embedded into a prompt.

Only single-digit number words are replaced ("seven five two" -> "7 5 2").
Compound numbers ("twenty", "nineteen sixty eight") are left for the
model, which the system prompt instructs to consolidate them.
"""

import re

DIGIT_WORDS = {
    'zero': '0',
    'one': '1',
    'two': '2',
    'three': '3',
    'four': '4',
    'five': '5',
    'six': '6',
    'seven': '7',
    'eight': '8',
    'nine': '9',
}

_DIGIT_WORD_RE = re.compile(r'\b(' + '|'.join(DIGIT_WORDS) + r')\b', re.IGNORECASE)


def preprocess_speech_text(text: str) -> str:
    """
    Trim a transcript and turn whole-word digit names into digits.

    Matching is case-insensitive and whole-word, so "someone" and
    "twenty" are untouched.
    """
    if not text:
        return ""
    return _DIGIT_WORD_RE.sub(lambda m: DIGIT_WORDS[m.group(1).lower()], text.strip())
