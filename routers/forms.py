"""
Forms Router

Form structure detection for clients that cannot inspect the page
themselves.

Endpoints:
    POST /api/detect-form - Detect the main form in HTML or at a URL
"""

from fastapi import APIRouter

from core.schemas import DetectFormRequest
from services.form.extractor import extract_form_schema, fetch_form_schema
from utils.exceptions import FormValidationError, SchemaError
from utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Forms"])


@router.post(
    "/detect-form",
    summary="Detect form structure",
    responses={
        400: {"description": "Missing input, unsafe URL or no form found"},
    }
)
async def detect_form(data: DetectFormRequest):
    """
    Extract the field schema of the largest form in a document.

    Send either ``html`` or ``url``; ``html`` wins when both are given.

    Returns:
        dict: FormSchema in wire format (fields, formName, formId, totalFields)
    """
    if data.html:
        schema = extract_form_schema(data.html)
    elif data.url:
        schema = await fetch_form_schema(data.url)
    else:
        raise FormValidationError("Either html or url is required", field="html")

    if schema is None:
        raise SchemaError("No form found in document")

    logger.info(f"Detected form '{schema.form_name}' with {schema.total_fields} fields")
    return schema.to_payload()
