"""
Form Schema Models

Immutable description of one form: a tree of fields, where group fields
carry nested children. Shared by extraction, prompting, reconciliation
and validation.

Wire format uses camelCase keys (minLength, formName, totalFields,
updatedFields); Python code uses snake_case attributes.
"""

from dataclasses import dataclass, field as dc_field
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


NESTED_TYPE = "nested"

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
    extra="ignore",
)


def _ensure_unique_names(fields: List["FormField"], scope: str) -> None:
    seen = set()
    for f in fields:
        if f.name in seen:
            raise ValueError(f"Duplicate field name '{f.name}' in {scope}")
        seen.add(f.name)


class FormField(BaseModel):
    """
    One form control, or one named group of controls.

    A field with a non-empty ``nested`` list is a group: its type is
    always ``nested`` and its value is an object of child values.
    """

    model_config = _MODEL_CONFIG

    name: str = Field(..., min_length=1)
    type: str = "text"
    label: Optional[str] = None
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    nested: Optional[List["FormField"]] = None

    @model_validator(mode="before")
    @classmethod
    def _force_nested_type(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("nested"):
            data = {**data, "type": NESTED_TYPE}
        return data

    @model_validator(mode="after")
    def _check_children(self) -> "FormField":
        if self.nested:
            _ensure_unique_names(self.nested, f"group '{self.name}'")
        return self

    @property
    def is_nested(self) -> bool:
        return bool(self.nested)


class FormSchema(BaseModel):
    """
    Root container for a detected or caller-supplied form.

    ``total_fields`` counts top-level fields only and defaults to
    ``len(fields)``.
    """

    model_config = _MODEL_CONFIG

    fields: List[FormField] = Field(default_factory=list)
    form_name: Optional[str] = None
    form_id: Optional[str] = None
    total_fields: int = 0

    @model_validator(mode="before")
    @classmethod
    def _default_total(cls, data: Any) -> Any:
        if isinstance(data, dict) and "totalFields" not in data and "total_fields" not in data:
            data = {**data, "total_fields": len(data.get("fields") or [])}
        return data

    @model_validator(mode="after")
    def _check_fields(self) -> "FormSchema":
        _ensure_unique_names(self.fields, "form")
        return self

    def get_field(self, name: str) -> Optional[FormField]:
        """Top-level field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict using wire (camelCase) keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ReconciliationResult(BaseModel):
    """Outcome of mapping one LLM response onto a FormSchema."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    success: bool = True
    data: Dict[str, Any] = Field(default_factory=dict)
    errors: Dict[str, str] = Field(default_factory=dict)
    updated_fields: List[str] = Field(default_factory=list)

    @classmethod
    def failure(cls, message: str) -> "ReconciliationResult":
        """Whole-call failure: one general error, no partial data."""
        return cls(success=False, data={}, errors={"general": message}, updated_fields=[])


# =============================================================================
# Fill Configuration
# =============================================================================

FieldValidatorFn = Callable[[str, Any], Optional[str]]


@dataclass
class FieldMapping:
    """Per-field hooks applied during reconciliation."""
    transform: Optional[Callable[[Any], Any]] = None
    validate: Optional[Callable[[Any], Optional[str]]] = None


@dataclass
class FormFillConfig:
    """
    Options accepted by the fill pipeline.

    Only ``field_mappings`` and ``validate_field`` change core behavior;
    the rest is passed through for client-side form application.
    """
    parse_endpoint: str = "/api/parse-speech"
    field_mappings: Dict[str, FieldMapping] = dc_field(default_factory=dict)
    enable_highlights: bool = True
    highlight_duration: int = 3000
    auto_process: bool = True
    validate_field: Optional[FieldValidatorFn] = None
