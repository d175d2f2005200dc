"""
Field Validator

Checks a data object against a FormSchema and returns one message per
failing field.

Per field, in order: required, type format, min length, max length,
pattern. Once a value is present every check runs and a later failure
replaces an earlier message, so only the last failing check is reported.
Group fields holding a dict are validated recursively with dotted keys
(``address.zip``).
"""

import math
import re
from datetime import date, datetime
from typing import Any, Dict, Optional

from dateutil import parser as date_parser

from services.form.schema import FieldValidatorFn, FormField, FormSchema
from utils.logging import get_logger

logger = get_logger(__name__)


EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# North American numbering only: optional +1, 3-3-4 digits
PHONE_RE = re.compile(r"^\+?1?[-.\s]?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}$")


# =============================================================================
# Type Checks
# =============================================================================

def is_valid_email(value: Any) -> bool:
    return bool(EMAIL_RE.match(str(value)))


def is_valid_phone(value: Any) -> bool:
    if not value:
        return True
    return bool(PHONE_RE.match(str(value)))


def _parse_date(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    try:
        return date_parser.parse(text)
    except (ValueError, OverflowError):
        return None


def is_valid_date(value: Any) -> bool:
    """A parseable calendar date that is not in the future."""
    if not value:
        return True
    parsed = _parse_date(value)
    if parsed is None:
        return False
    now = datetime.now(parsed.tzinfo) if parsed.tzinfo else datetime.now()
    return parsed <= now


def is_valid_number(value: Any) -> bool:
    # Blank strings coerce to zero
    if isinstance(value, str) and not value.strip():
        return True
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return not math.isnan(number)


def _matches_pattern(pattern: str, value: str) -> bool:
    try:
        return re.search(pattern, value) is not None
    except re.error as e:
        logger.warning(f"Ignoring invalid field pattern {pattern!r}: {e}")
        return True


# =============================================================================
# Validation
# =============================================================================

def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_field_value(field: FormField, value: Any) -> Optional[str]:
    """
    Validate one scalar value against its field definition.

    Returns:
        The error message, or None if the value is valid
    """
    if field.required and _is_missing(value):
        return f"{field.label or field.name} is required"

    if value is None:
        return None

    error = None

    if field.type == "email" and not is_valid_email(value):
        error = "Invalid email format"
    elif field.type == "tel" and not is_valid_phone(value):
        error = "Invalid phone number format"
    elif field.type == "date" and not is_valid_date(value):
        error = "Invalid date format"
    elif field.type == "number" and not is_valid_number(value):
        error = "Must be a valid number"

    if isinstance(value, str):
        if field.min_length and len(value) < field.min_length:
            error = f"Must be at least {field.min_length} characters"
        if field.max_length and len(value) > field.max_length:
            error = f"Must be no more than {field.max_length} characters"

    if field.pattern and isinstance(value, str) and not _matches_pattern(field.pattern, value):
        error = "Invalid format"

    return error


def _validate_fields(fields, data: Dict[str, Any], prefix: str, errors: Dict[str, str]) -> None:
    for f in fields:
        key = f"{prefix}{f.name}"
        value = data.get(f.name)

        if f.is_nested and isinstance(value, dict):
            _validate_fields(f.nested, value, f"{key}.", errors)
            continue

        message = validate_field_value(f, value)
        if message:
            errors[key] = message


def validate_form_data(data: Dict[str, Any], schema: FormSchema) -> Dict[str, str]:
    """
    Validate a data object against a schema.

    Args:
        data: Field name -> value (nested dicts for group fields)
        schema: Form definition

    Returns:
        Mapping of field name (dotted for nested children) to error message
    """
    errors: Dict[str, str] = {}
    _validate_fields(schema.fields, data or {}, "", errors)
    return errors


def schema_field_validator(schema: FormSchema) -> FieldValidatorFn:
    """
    Build a per-field validator callback bound to a schema.

    Suitable as ``FormFillConfig.validate_field``: it validates one
    top-level field's resolved value and returns the first error, or None.
    Unknown field names always pass.
    """
    def validate(field_name: str, value: Any) -> Optional[str]:
        f = schema.get_field(field_name)
        if f is None:
            return None
        errors: Dict[str, str] = {}
        _validate_fields([f], {field_name: value}, "", errors)
        return next(iter(errors.values()), None)

    return validate
