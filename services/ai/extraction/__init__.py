"""
Extraction Package

Reconciliation of language-model answers with form schemas.
"""

from services.ai.extraction.reconciler import (
    FIELD_VARIATIONS,
    get_field_variations,
    parse_llm_response,
    reconcile,
    resolve_field_value,
)

__all__ = [
    'FIELD_VARIATIONS',
    'get_field_variations',
    'parse_llm_response',
    'reconcile',
    'resolve_field_value',
]
