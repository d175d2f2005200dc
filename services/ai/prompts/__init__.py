"""
Prompts Package

LLM prompt engineering for transcript-to-form extraction.
"""

from services.ai.prompts.form_prompts import (
    build_prompts,
    generate_client_prompt,
    generate_system_prompt,
)

__all__ = [
    'build_prompts',
    'generate_client_prompt',
    'generate_system_prompt',
]
