"""
Form Fill Pipeline

Transcript in, reconciled form data out:

    transcript -> preprocess/sanitize -> prompts -> LLMGateway
               -> reconcile (+ validation) -> ReconciliationResult

parse_speech_to_form is the stateless pipeline used by the HTTP layer.
FormFillSession keeps the current schema and config between transcripts
for callers that fill one form over several utterances.

Usage:
    session = FormFillSession(gateway)
    session.detect_form(html)
    result = await session.process_transcript("my name is Jane Doe")
"""

from dataclasses import replace
from typing import Any, Dict, Optional

from services.ai.extraction.reconciler import reconcile
from services.ai.gateway import LLMGateway
from services.ai.prompts.form_prompts import build_prompts
from services.form.extractor import extract_form_schema
from services.form.schema import FormFillConfig, FormSchema, ReconciliationResult
from services.form.validator import schema_field_validator, validate_form_data
from utils.exceptions import SchemaError
from utils.logging import get_logger, log_fill_result

logger = get_logger(__name__)


async def parse_speech_to_form(
    transcript: str,
    schema: FormSchema,
    gateway: LLMGateway,
    config: Optional[FormFillConfig] = None
) -> ReconciliationResult:
    """
    Run one transcript through the full pipeline.

    Gateway errors propagate; an unparseable model answer comes back as a
    failure result.
    """
    system_prompt, user_prompt = build_prompts(schema, transcript)
    logger.debug(
        f"Prompting {gateway.provider}/{gateway.model} for {len(schema.fields)} fields",
        extra={"transcript": transcript}
    )

    raw_text = await gateway.complete(system_prompt, user_prompt)
    result = reconcile(raw_text, schema, config)

    log_fill_result(schema.form_name, len(result.updated_fields), len(result.errors), result.success)
    return result


class FormFillSession:
    """
    Holds one form's schema and fill configuration.

    Attributes:
        gateway: Language-model capability used for every transcript
        config: Field mappings and validator; when no ``validate_field`` is
            given, the current schema's own constraints are used
    """

    def __init__(
        self,
        gateway: LLMGateway,
        config: Optional[FormFillConfig] = None,
        schema: Optional[FormSchema] = None
    ):
        self.gateway = gateway
        self.config = config or FormFillConfig()
        self._schema = schema

    @property
    def schema(self) -> Optional[FormSchema]:
        return self._schema

    def set_schema(self, schema: FormSchema) -> None:
        self._schema = schema

    def detect_form(self, html: str) -> FormSchema:
        """
        Detect the main form in ``html`` and make it the current schema.

        Raises:
            SchemaError: If the document has no form or the form has no fields
        """
        schema = extract_form_schema(html)
        if schema is None:
            raise SchemaError("No form found in document")
        if not schema.fields:
            raise SchemaError("Form has no fillable fields", details={"form_name": schema.form_name})

        self._schema = schema
        return schema

    def _effective_config(self) -> FormFillConfig:
        if self.config.validate_field is not None:
            return self.config
        return replace(self.config, validate_field=schema_field_validator(self._schema))

    async def process_transcript(self, transcript: str) -> ReconciliationResult:
        """
        Fill the current form from one transcript.

        Raises:
            SchemaError: If no schema has been detected or set
        """
        if self._schema is None:
            raise SchemaError("Form structure not initialized. Call detect_form() or set_schema() first.")

        try:
            return await parse_speech_to_form(transcript, self._schema, self.gateway, self._effective_config())
        except Exception as e:
            logger.error(f"Transcript processing failed: {e}")
            return ReconciliationResult.failure(getattr(e, "message", None) or str(e))

    def validate(self, data: Dict[str, Any]) -> Dict[str, str]:
        """Validate a data object against the current schema."""
        if self._schema is None:
            return {"general": "Form structure not initialized"}
        return validate_form_data(data, self._schema)
