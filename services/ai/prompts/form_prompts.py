"""
Form Prompts

Prompt builders for transcript-to-form extraction.

The system prompt lists every field of the schema (recursively, numbered
by parent path) between fixed instruction blocks; the client prompt
carries the transcript. Both are pure functions of their inputs.
"""

from typing import List, Optional, Tuple

from services.form.schema import FormField, FormSchema
from services.ai.voice.preprocessor import preprocess_speech_text
from utils.sanitize import sanitize_for_prompt


# =============================================================================
# Instruction Blocks
# =============================================================================

ROLE_STATEMENT = "You are an AI assistant that extracts structured data from speech input to fill out a form. "

TASK_STATEMENT = (
    "\n\nYour task is to extract information from natural speech and return it as a "
    "valid JSON object with fields that match the form structure."
)

CRITICAL_REQUIREMENTS = """

CRITICAL REQUIREMENTS:
1. Return ONLY valid JSON - no explanations, no markdown, no additional text
2. Use null for missing fields - never omit fields
3. Follow the exact field structure specified below
4. Be conservative - only extract information that is explicitly mentioned
5. Handle various speech patterns, pauses, and natural language variations
6. Normalize data formats appropriately for each field type
7. For nested structures, create objects with the specified sub-fields
8. For arrays, return arrays of values
9. For select/radio fields, match the exact option text or value

FORM FIELDS TO EXTRACT:"""

PARSING_RULES = """

PARSING RULES:
- Extract information that matches the field names and types above
- For nested objects, use the exact sub-field names specified
- For date fields, use YYYY-MM-DD format when possible
- For phone numbers, normalize to digits only
- For email addresses, validate the format
- For select/radio fields, match the exact option text or value
- For arrays, collect all mentioned values
- Be conservative - only extract information you're confident about"""

NUMBER_CONSOLIDATION_RULES = """

NUMBER CONSOLIDATION RULES:
- CRITICAL: When you hear multiple digits spoken individually, ALWAYS consolidate them into a single number
- Examples: "seven five two four one" → "75241", "one two three" → "123", "two one four" → "214"
- This applies to ALL number fields: zip codes, phone numbers, house numbers, years, dates, etc.
- For phone numbers: consolidate all digits and remove formatting (dashes, spaces, parentheses)
- For dates: convert to YYYY-MM-DD format after consolidation
- For years: "nineteen sixty eight" → "1968", "twenty twenty four" → "2024"
- For addresses: "one two three Main Street" → "123 Main Street"
- For zip codes: "seven five two four one" → "75241"
- Always prioritize the consolidated numeric form over the spoken form

Remember: Return ONLY the JSON object, nothing else."""

CLIENT_PROMPT_TEMPLATE = """Extract personal information from this speech transcript and return it as a JSON object following the exact structure specified in the system prompt.

IMPORTANT: Consolidate all spoken numbers into their numeric form (e.g., "seven five two four one" → "75241").

Speech transcript: "{transcript}"

Return only the JSON object with the extracted information."""


# =============================================================================
# Field Listing
# =============================================================================

def describe_field(field: FormField) -> str:
    """One-line annotation of a field (without number or indent)."""
    line = f"**{field.name}**"

    if field.label:
        line += f' (Label: "{field.label}")'
    if field.placeholder:
        line += f' (Placeholder: "{field.placeholder}")'

    line += f" - Type: {field.type}"

    if field.required:
        line += " [REQUIRED]"
    if field.options:
        line += f" (Options: {', '.join(field.options)})"
    if field.pattern:
        line += f" (Pattern: {field.pattern})"
    if field.min_length or field.max_length:
        line += f" (Length: {field.min_length or 0}-{field.max_length or 'unlimited'})"

    return line


def generate_field_descriptions(
    fields: List[FormField],
    level: int = 1,
    parent_number: str = ""
) -> str:
    """
    Numbered field listing; group children are listed under their parent.

    Top-level fields are numbered "1.", "2."; children of field 2 are
    "2.1.", "2.2." and sit one indent level deeper.
    """
    descriptions = ""
    indent = "  " * (level - 1)

    for index, field in enumerate(fields, start=1):
        number = f"{parent_number}{index}."
        descriptions += f"\n{indent}{number} {describe_field(field)}"

        if field.nested:
            descriptions += f"\n{indent}   Contains nested fields:"
            descriptions += generate_field_descriptions(field.nested, level + 1, number)

    return descriptions


# =============================================================================
# Prompt Builders
# =============================================================================

def generate_system_prompt(schema: FormSchema) -> str:
    """Instructions plus the full field listing for a schema."""
    prompt = ROLE_STATEMENT

    if schema.form_name:
        prompt += f'The form is titled "{schema.form_name}". '

    prompt += TASK_STATEMENT
    prompt += CRITICAL_REQUIREMENTS
    prompt += f"\n{generate_field_descriptions(schema.fields)}"
    prompt += PARSING_RULES
    prompt += NUMBER_CONSOLIDATION_RULES

    return prompt


def generate_client_prompt(transcript: str) -> str:
    """Wrap an already-prepared transcript in the extraction request."""
    return CLIENT_PROMPT_TEMPLATE.format(transcript=transcript)


def prepare_transcript(transcript: str, max_length: Optional[int] = None) -> str:
    """Digit-word preprocessing followed by prompt sanitization."""
    return sanitize_for_prompt(preprocess_speech_text(transcript), max_length)


def build_prompts(schema: FormSchema, transcript: str) -> Tuple[str, str]:
    """
    Build the (system, user) prompt pair for one transcript.

    The transcript is preprocessed and sanitized before embedding.
    """
    return generate_system_prompt(schema), generate_client_prompt(prepare_transcript(transcript))
