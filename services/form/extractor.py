"""
Form Extractor

Builds a FormSchema from a tree of form controls.

The extraction logic only talks to a FormDocumentAdapter, so any toolkit
that can list forms and controls, describe a control, and find its
grouping ancestor can feed it. SoupFormAdapter covers static HTML via
BeautifulSoup.

Grouping rules:
    - radio/checkbox controls sharing a name become one field whose
      options are the members' values
    - a control inside a fieldset, section, or div whose class mentions
      "field"/"group" becomes a nested field holding the other controls
      of that container (recursively, depth-capped)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Optional, Set, Tuple

import httpx
from bs4 import BeautifulSoup, Tag

from config.constants import (
    DEFAULT_FORM_NAME,
    FORM_HEADING_TAGS,
    GROUP_CLASS_HINTS,
    GROUP_CONTAINER_TAGS,
    GROUPABLE_INPUT_TYPES,
    INPUT_LIKE_TAGS,
    MAX_NESTING_DEPTH,
    NON_DATA_INPUT_TYPES,
)
from config.settings import settings
from services.form.schema import FormField, FormSchema
from utils.exceptions import FormValidationError
from utils.logging import get_logger, log_api_call
from utils.sanitize import validate_form_url

logger = get_logger(__name__)


@dataclass
class ControlInfo:
    """Everything the extractor needs to know about one control."""
    name: str = ""
    element_id: str = ""
    type: str = "text"
    required: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    placeholder: Optional[str] = None
    value: str = ""
    label: Optional[str] = None
    options: List[str] = field(default_factory=list)
    adjacent_text: str = ""

    @property
    def key(self) -> str:
        """Field name: explicit name, else id."""
        return self.name or self.element_id


class FormDocumentAdapter(ABC):
    """Read-only view of a document containing forms."""

    @abstractmethod
    def find_forms(self) -> List[Any]:
        """All form nodes in document order."""

    @abstractmethod
    def find_controls(self, scope: Any) -> List[Any]:
        """Input-like descendants of ``scope`` in document order."""

    @abstractmethod
    def describe_control(self, control: Any, scope: Any) -> ControlInfo:
        """Attributes of a control; labels are looked up within ``scope``."""

    @abstractmethod
    def find_group_container(self, control: Any, scope: Any) -> Optional[Any]:
        """Nearest grouping ancestor of ``control`` strictly inside ``scope``."""

    @abstractmethod
    def form_attributes(self, form: Any) -> Tuple[Optional[str], Optional[str]]:
        """(name attribute, id attribute) of a form."""

    @abstractmethod
    def heading_text(self, form: Any) -> Optional[str]:
        """Text of the first heading or legend inside a form."""


# =============================================================================
# BeautifulSoup Adapter
# =============================================================================

def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _node_text(tag: Tag) -> str:
    """Text of all descendants, whitespace runs collapsed to one space."""
    return " ".join(tag.get_text().split())


def _label_text(label: Tag) -> str:
    """Label text without the text of controls wrapped inside it."""
    parts = []
    for text in label.find_all(string=True):
        if any(p.name in ("select", "textarea", "option") for p in text.parents if isinstance(p, Tag)):
            continue
        parts.append(text)
    return " ".join("".join(parts).split())


class SoupFormAdapter(FormDocumentAdapter):
    """FormDocumentAdapter over a BeautifulSoup tree."""

    def __init__(self, document, parser: str = "html.parser"):
        if isinstance(document, (BeautifulSoup, Tag)):
            self.soup = document
        else:
            self.soup = BeautifulSoup(document or "", parser)

    def find_forms(self) -> List[Tag]:
        return self.soup.find_all("form")

    def find_controls(self, scope: Tag) -> List[Tag]:
        return scope.find_all(list(INPUT_LIKE_TAGS))

    def describe_control(self, control: Tag, scope: Tag) -> ControlInfo:
        tag_name = control.name.lower()
        if tag_name == "input":
            control_type = (control.get("type") or "text").strip().lower()
        else:
            control_type = tag_name

        element_id = control.get("id") or ""
        info = ControlInfo(
            name=control.get("name") or "",
            element_id=element_id,
            type=control_type,
            required=control.has_attr("required"),
            min_length=_parse_int(control.get("minlength")),
            max_length=_parse_int(control.get("maxlength")),
            pattern=control.get("pattern") or None,
            placeholder=control.get("placeholder") or None,
            value=control.get("value") or "",
            label=self._find_label(control, scope, element_id),
        )

        if tag_name == "select":
            info.options = [_node_text(option) for option in control.find_all("option")]

        sibling = control.find_next_sibling()
        if sibling is not None:
            info.adjacent_text = _node_text(sibling)

        return info

    def _find_label(self, control: Tag, scope: Tag, element_id: str) -> Optional[str]:
        if element_id:
            explicit = scope.find("label", attrs={"for": element_id})
            if explicit is not None:
                return _node_text(explicit)

        wrapping = control.find_parent("label")
        if wrapping is not None:
            return _label_text(wrapping)

        return control.get("aria-label") or None

    def find_group_container(self, control: Tag, scope: Tag) -> Optional[Tag]:
        for parent in control.parents:
            if parent is scope:
                return None
            if self._is_group_container(parent):
                return parent
        return None

    @staticmethod
    def _is_group_container(tag: Tag) -> bool:
        if tag.name in GROUP_CONTAINER_TAGS:
            return True
        if tag.name != "div":
            return False
        classes = tag.get("class") or []
        class_attr = " ".join(classes) if isinstance(classes, list) else str(classes)
        return any(hint in class_attr for hint in GROUP_CLASS_HINTS)

    def form_attributes(self, form: Tag) -> Tuple[Optional[str], Optional[str]]:
        return form.get("name") or None, form.get("id") or None

    def heading_text(self, form: Tag) -> Optional[str]:
        heading = form.find(FORM_HEADING_TAGS)
        if heading is None:
            return None
        return _node_text(heading) or None


# =============================================================================
# Extractor
# =============================================================================

class FormExtractor:
    """
    Turns the controls of a form into a FormSchema.

    Usage:
        extractor = FormExtractor(SoupFormAdapter(html))
        schema = extractor.detect()
    """

    def __init__(self, adapter: FormDocumentAdapter, max_depth: int = MAX_NESTING_DEPTH):
        self.adapter = adapter
        self.max_depth = max_depth

    def detect(self) -> Optional[FormSchema]:
        """
        Pick the form with the most controls and extract its schema.

        Returns:
            FormSchema, or None when the document has no forms
        """
        forms = self.adapter.find_forms()
        if not forms:
            logger.debug("No forms found in document")
            return None

        target = forms[0]
        max_controls = 0
        for form in forms:
            count = len(self.adapter.find_controls(form))
            if count > max_controls:
                max_controls = count
                target = form

        fields = self.extract_fields(target)
        name_attr, form_id = self.adapter.form_attributes(target)
        form_name = name_attr or self.adapter.heading_text(target) or DEFAULT_FORM_NAME

        logger.info(f"Detected form '{form_name}' with {len(fields)} top-level fields ({len(forms)} form(s) on page)")
        return FormSchema(fields=fields, form_name=form_name, form_id=form_id)

    def extract_fields(self, scope: Any) -> List[FormField]:
        """Extract the fields of one form or container."""
        return self._extract(scope, exclude=frozenset(), visited=frozenset({id(scope)}), depth=0)

    def _extract(
        self,
        scope: Any,
        exclude: FrozenSet[str],
        visited: FrozenSet[int],
        depth: int
    ) -> List[FormField]:
        controls = []
        for control in self.adapter.find_controls(scope):
            info = self.adapter.describe_control(control, scope)
            if info.type in NON_DATA_INPUT_TYPES:
                continue
            controls.append((control, info))

        processed: Set[str] = set(exclude)
        fields: List[FormField] = []

        for control, info in controls:
            key = info.key
            # Unnamed controls cannot be targeted when filling
            if not key or key in processed:
                continue

            data = {
                "name": key,
                "type": info.type,
                "label": info.label,
                "placeholder": info.placeholder,
                "required": info.required,
                "pattern": info.pattern,
                "min_length": info.min_length,
                "max_length": info.max_length,
            }

            if info.type == "select":
                data["options"] = info.options

            if info.type in GROUPABLE_INPUT_TYPES and info.name:
                members = [other for _, other in controls if other.name == info.name]
                if len(members) > 1:
                    data["options"] = [m.value or m.adjacent_text for m in members]
                    processed.add(info.name)

            container = self.adapter.find_group_container(control, scope)
            if container is not None:
                nested = self._extract_group(container, processed | {key}, visited, depth)
                if nested:
                    data["nested"] = nested

            fields.append(FormField(**data))
            processed.add(key)

        return fields

    def _extract_group(
        self,
        container: Any,
        exclude: Set[str],
        visited: FrozenSet[int],
        depth: int
    ) -> List[FormField]:
        if id(container) in visited:
            return []
        if depth + 1 > self.max_depth:
            logger.warning(f"Nesting deeper than {self.max_depth} levels ignored")
            return []
        return self._extract(
            container,
            exclude=frozenset(exclude),
            visited=visited | {id(container)},
            depth=depth + 1,
        )


# =============================================================================
# Convenience Entry Points
# =============================================================================

def extract_form_schema(html: str) -> Optional[FormSchema]:
    """Detect the main form in an HTML document."""
    return FormExtractor(SoupFormAdapter(html)).detect()


async def _check_request_url(request: httpx.Request) -> None:
    # Runs for the first request and for every redirect hop
    validate_form_url(str(request.url))


async def fetch_form_schema(
    url: str,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> Optional[FormSchema]:
    """
    Download a page and detect its main form.

    Redirects are followed, but each hop is validated like the original URL.

    Raises:
        FormValidationError: If the URL (or a redirect target) is unsafe or
            the page cannot be fetched
    """
    url = validate_form_url(url)
    timeout = timeout or settings.FORM_FETCH_TIMEOUT_SECONDS

    try:
        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
            event_hooks={"request": [_check_request_url]},
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPError as e:
        log_api_call("form-fetch", url[:50], success=False, error=str(e))
        raise FormValidationError("Failed to fetch form page", field="url", details={"reason": str(e)})

    log_api_call("form-fetch", url[:50], success=True)
    return extract_form_schema(response.text)
