"""
Application Constants

Centralizes magic numbers and fixed tables used across form detection,
prompting and speech handling.

Usage:
    from config.constants import MAX_NESTING_DEPTH, ALLOWED_AUDIO_TYPES
"""

# =============================================================================
# Form Detection
# =============================================================================

# Tags that carry user-entered values
INPUT_LIKE_TAGS = ("input", "select", "textarea")

# Input types that never hold form data
NON_DATA_INPUT_TYPES = frozenset({"submit", "button", "reset", "image", "hidden"})

# Input types grouped by shared name
GROUPABLE_INPUT_TYPES = frozenset({"radio", "checkbox"})

# Class-name fragments that mark a <div> as a field group
GROUP_CLASS_HINTS = ("field", "group")

# Tags that always start a field group
GROUP_CONTAINER_TAGS = frozenset({"fieldset", "section"})

# Headings searched for a form display name
FORM_HEADING_TAGS = ["h1", "h2", "h3", "legend"]

DEFAULT_FORM_NAME = "Form"

# Recursion cap for nested group detection
MAX_NESTING_DEPTH = 10


# =============================================================================
# Speech / Audio
# =============================================================================

ALLOWED_AUDIO_TYPES = (
    "audio/wav",
    "audio/mp3",
    "audio/mpeg",
    "audio/mp4",
    "audio/webm",
    "audio/ogg",
    "audio/flac",
)

DEFAULT_AUDIO_TYPE = "audio/webm"
DEFAULT_AUDIO_FILENAME = "recording.webm"

# Below this language probability a transcript is treated as noise
NOISE_LANGUAGE_PROBABILITY = 0.3

# Minimum transcript length / word characters to keep
NOISE_MIN_TEXT_LENGTH = 3
NOISE_MIN_WORD_CHARS = 2


# =============================================================================
# LLM Providers
# =============================================================================

# Auto-selection order when LLM_PROVIDER is "auto"
PROVIDER_PRIORITY = ("anthropic", "openai", "together")

DEFAULT_PROVIDER_MODELS = {
    "openai": "gpt-3.5-turbo",
    "anthropic": "claude-3-haiku-20240307",
    "together": "meta-llama/Llama-2-7b-chat-hf",
}

PROVIDER_DISPLAY_NAMES = {
    "openai": "OpenAI",
    "anthropic": "Anthropic",
    "together": "Together.ai",
}
