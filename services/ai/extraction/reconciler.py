"""
Response Reconciler

Maps a language model's JSON answer back onto a FormSchema.

Matching per field, first hit wins:
    1. exact key (a present ``null`` counts as a hit)
    2. group fields: children resolved against the same object
    3. known naming variations (first_name, fname, ...) and generic
       case variants (capitalized, camelCase <-> snake_case)

Matched values then go through the field's mapping hooks (transform then
validate) or the global field validator. Per-field problems are collected
in ``errors``; only an unparseable response fails the whole call.

Usage:
    result = reconcile(llm_text, schema, config)
    if result.success:
        apply(result.data)
"""

import json
import re
from typing import Any, Dict, List, Optional

from services.form.schema import FormField, FormFillConfig, FormSchema, ReconciliationResult
from utils.exceptions import FieldTransformError, LLMResponseParseError
from utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Variation Table
# =============================================================================

# Keyed by lower-cased field name with separators removed
FIELD_VARIATIONS: Dict[str, List[str]] = {
    'firstname': ['firstName', 'first_name', 'fname'],
    'lastname': ['lastName', 'last_name', 'lname'],
    'email': ['emailAddress', 'email_address'],
    'phone': ['phoneNumber', 'phone_number', 'telephone', 'tel'],
    'dateofbirth': ['dob', 'birthDate', 'birth_date'],
    'street': ['streetAddress', 'street_address', 'address1'],
    'city': ['cityName', 'city_name'],
    'state': ['stateName', 'state_name', 'province'],
    'zipcode': ['zip', 'postalCode', 'postal_code', 'zipCode'],
}

_MISSING = object()


def _lookup_key(name: str) -> str:
    return re.sub(r'[_\-\s]', '', name).lower()


def get_field_variations(field_name: str) -> List[str]:
    """
    Alternative keys a model might use for ``field_name``.

    Table entries come first, then the capitalized name, the snake_case
    form of a camelCase name and the camelCase form of a snake_case name.
    The field name itself and duplicates are left out.
    """
    variations: List[str] = list(FIELD_VARIATIONS.get(_lookup_key(field_name), []))

    if field_name:
        variations.append(field_name[0].upper() + field_name[1:])

    snake = re.sub(r'([A-Z])', r'_\1', field_name).lower()
    variations.append(snake)

    camel = re.sub(r'_([a-z])', lambda m: m.group(1).upper(), field_name)
    variations.append(camel)

    unique: List[str] = []
    for candidate in variations:
        if candidate and candidate != field_name and candidate not in unique:
            unique.append(candidate)
    return unique


# =============================================================================
# Parsing
# =============================================================================

def parse_llm_response(raw_text: str) -> Dict[str, Any]:
    """
    Parse a model response into a JSON object.

    Markdown code fences around the JSON are tolerated.

    Raises:
        LLMResponseParseError: If the text is not a JSON object
    """
    if not raw_text or not raw_text.strip():
        raise LLMResponseParseError("Empty response from language model")

    clean_text = raw_text.replace('```json', '').replace('```', '').strip()

    try:
        parsed = json.loads(clean_text)
    except json.JSONDecodeError as e:
        raise LLMResponseParseError(
            "Failed to parse language model response",
            details={"reason": e.msg, "position": e.pos}
        )

    if not isinstance(parsed, dict):
        raise LLMResponseParseError(
            "Language model response is not a JSON object",
            details={"type": type(parsed).__name__}
        )

    return parsed


# =============================================================================
# Field Resolution
# =============================================================================

def _resolve(parsed: Dict[str, Any], field: FormField) -> Any:
    if field.name in parsed:
        return parsed[field.name]

    if field.nested:
        group: Dict[str, Any] = {}
        for child in field.nested:
            value = _resolve(parsed, child)
            if value is not _MISSING and value is not None:
                group[child.name] = value
        return group or None

    for variation in get_field_variations(field.name):
        if variation in parsed:
            return parsed[variation]

    return _MISSING


def resolve_field_value(parsed: Dict[str, Any], field: FormField) -> Optional[Any]:
    """
    Find the value for one field in a parsed response.

    Returns:
        The matched value, or None when nothing matched (or the match was null)
    """
    value = _resolve(parsed, field)
    return None if value is _MISSING else value


# =============================================================================
# Reconciliation
# =============================================================================

def _check_value(field_name: str, value: Any, config: FormFillConfig):
    """Apply mapping hooks or the global validator. Returns (value, error)."""
    mapping = config.field_mappings.get(field_name)

    if mapping is not None:
        try:
            if mapping.transform is not None:
                value = mapping.transform(value)
            if mapping.validate is not None:
                error = mapping.validate(value)
                if error:
                    return value, error
        except Exception as e:
            error = FieldTransformError(field_name, f"Transform error: {e}")
            logger.warning(f"Field mapping for '{field_name}' failed: {e}")
            return value, error.message
        return value, None

    if config.validate_field is not None:
        return value, config.validate_field(field_name, value)

    return value, None


def reconcile(
    raw_text: str,
    schema: FormSchema,
    config: Optional[FormFillConfig] = None
) -> ReconciliationResult:
    """
    Turn a raw model response into a schema-shaped data object.

    Args:
        raw_text: Model output, expected to be a JSON object
        schema: Form the response should be mapped onto
        config: Optional field mappings and global validator

    Returns:
        ReconciliationResult; ``success`` is False only when the response
        could not be parsed
    """
    config = config or FormFillConfig()

    try:
        parsed = parse_llm_response(raw_text)
    except LLMResponseParseError as e:
        logger.warning(f"Reconciliation failed: {e.message}")
        return ReconciliationResult.failure(e.message)

    data: Dict[str, Any] = {}
    errors: Dict[str, str] = {}
    updated_fields: List[str] = []

    for field in schema.fields:
        value = resolve_field_value(parsed, field)
        if value is None:
            continue

        value, error = _check_value(field.name, value, config)
        if error:
            errors[field.name] = error
            continue

        data[field.name] = value
        updated_fields.append(field.name)

    logger.info(
        f"Reconciled {len(updated_fields)}/{len(schema.fields)} fields "
        f"({len(errors)} errors, response keys: {sorted(parsed)})"
    )

    return ReconciliationResult(
        success=True,
        data=data,
        errors=errors,
        updated_fields=updated_fields,
    )
