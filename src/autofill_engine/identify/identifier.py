"""Discovery of fillable widgets and synthesis of their identifiers."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from bs4 import Tag

from ..core.config import AutofillConfig
from ..core.dom import (
    FrameAccessError,
    LiveDocument,
    attribute_text,
    input_type,
    is_checkable,
    is_content_editable,
)
from ..core.models import FieldDescriptor, FieldType
from .platforms import (
    FormPlatform,
    custom_form_label,
    detect_platform,
    is_custom_form_element,
    platform_selectors,
)
from .selectors import selector_identifier

logger = logging.getLogger(__name__)

BASE_SELECTORS = (
    "input:not([disabled]):not([hidden]):not([readonly])",
    "select:not([disabled]):not([readonly])",
    "textarea:not([disabled]):not([readonly])",
    '[contenteditable="true"]:not(html):not(body)',
    "iframe",
)

NATIVE_WIDGETS = {"input", "textarea", "select"}

IDENTIFIER_ATTRIBUTES = (
    "name",
    "id",
    "placeholder",
    "title",
    "aria-label",
    "data-bind",
    "ng-model",
    "aria-describedby",
)

SNAPSHOT_ATTRIBUTES = (
    "name",
    "id",
    "type",
    "placeholder",
    "title",
    "class",
    "data-bind",
    "ng-model",
    "autocomplete",
    "role",
)


def quoted(text: str) -> str:
    return f'"{text}"'


def classify_field(element: Tag, platform: Optional[FormPlatform] = None) -> FieldType:
    """Maps a widget onto the closed set of :class:`FieldType` values."""

    tag = element.name
    if tag == "input":
        kind = input_type(element)
        if kind == "password":
            return FieldType.PASSWORD
        if kind in {"checkbox", "radio"}:
            return FieldType.CHECKBOX_OR_RADIO
        return FieldType.TEXT_LIKE

    if tag == "select":
        return FieldType.SELECT_DROPDOWN

    if tag == "textarea" or is_content_editable(element):
        return FieldType.TEXT_LIKE

    if platform is not None:
        if attribute_text(element, "role") == "listbox":
            return FieldType.SELECT_DROPDOWN
        if element.has_attr("aria-checked"):
            return FieldType.CHECKBOX_OR_RADIO

    return FieldType.TEXT_LIKE


class FieldIdentifier:
    """Builds :class:`FieldDescriptor` records for one document.

    A new instance is meant to be created for every identification pass;
    nothing is cached between calls.
    """

    def __init__(self, document: LiveDocument, config: Optional[AutofillConfig] = None) -> None:
        self.document = document
        self.config = config or AutofillConfig()
        self.platform = detect_platform(document)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def identify(self, candidates: Optional[Iterable[Tag]] = None) -> List[FieldDescriptor]:
        return list(self.iter_fields(candidates))

    def iter_fields(self, candidates: Optional[Iterable[Tag]] = None) -> Iterator[FieldDescriptor]:
        elements = self.candidate_elements() if candidates is None else candidates
        for element in elements:
            try:
                if not self.is_fillable(element):
                    continue
                descriptor = self.analyze(element)
            except Exception:
                logger.debug("Skipping widget %s after analysis failure", element.name, exc_info=True)
                continue
            if descriptor is not None:
                yield descriptor

    def candidate_elements(self) -> List[Tag]:
        selectors = BASE_SELECTORS + platform_selectors(self.platform)

        elements: List[Tag] = []
        seen: set[int] = set()
        for selector in selectors:
            try:
                matches = self.document.select(selector)
            except Exception:
                logger.warning("Invalid selector skipped: %s", selector, exc_info=True)
                continue
            for element in matches:
                if id(element) in seen:
                    continue
                seen.add(id(element))
                elements.append(element)
        return elements

    def is_fillable(self, element: Tag) -> bool:
        if element.has_attr("disabled") or element.has_attr("readonly"):
            return False
        if input_type(element) == "hidden":
            return False

        element_id = attribute_text(element, "id") or ""
        if self.config.reserved_id_prefix and element_id.startswith(self.config.reserved_id_prefix):
            return False

        if element.name in NATIVE_WIDGETS or is_content_editable(element):
            return True
        if element.name == "iframe":
            return self.can_access_frame(element)
        return is_custom_form_element(self.platform, element)

    def can_access_frame(self, iframe: Tag) -> bool:
        try:
            frame = self.document.frame_document(iframe)
        except FrameAccessError:
            logger.debug("Frame %s is not accessible", attribute_text(iframe, "src"))
            return False
        return frame is not None and frame.body is not None

    def analyze(self, element: Tag) -> Optional[FieldDescriptor]:
        identifier = self.field_identifier(element)
        if not identifier:
            return None

        return FieldDescriptor(
            element=element,
            document=self.document,
            identifier=identifier,
            field_type=classify_field(element, self.platform),
            current_value=self.current_value(element),
            label=self.field_label(element),
            attributes=self.relevant_attributes(element),
        )

    # ------------------------------------------------------------------
    # Identifier synthesis
    # ------------------------------------------------------------------
    def field_identifier(self, element: Tag) -> Optional[str]:
        labelled_by = self._labelledby_text(element)
        if labelled_by:
            return quoted(labelled_by)

        label = self.document.label_for(attribute_text(element, "id") or "")
        if label is not None:
            text = self.document.text_of(label)
            if text:
                return quoted(text)

        if self.platform is not None:
            custom = custom_form_label(self.document, self.platform, element)
            if custom:
                return quoted(custom)

        for name in IDENTIFIER_ATTRIBUTES:
            value = (attribute_text(element, name) or "").strip()
            if value:
                return quoted(value)

        if is_checkable(element):
            value = attribute_text(element, "value")
            if value:
                return quoted(value)

        return selector_identifier(self.document, element, self.config)

    def _labelledby_text(self, element: Tag) -> str:
        reference = attribute_text(element, "aria-labelledby") or ""
        texts = []
        for label_id in reference.split():
            target = self.document.get_element_by_id(label_id)
            if target is not None:
                texts.append(self.document.text_of(target))
        return " ".join(text for text in texts if text)

    # ------------------------------------------------------------------
    # Value, label and attribute extraction
    # ------------------------------------------------------------------
    def current_value(self, element: Tag) -> str:
        if element.name in NATIVE_WIDGETS or is_content_editable(element):
            return self.document.value_of(element)

        if element.name == "iframe":
            try:
                return self.document.value_of(element)
            except FrameAccessError:
                logger.debug("Frame content unavailable; treating value as empty")
                return ""

        if self.platform is not None:
            return (attribute_text(element, "aria-label") or self.document.text_of(element)).strip()

        return ""

    def field_label(self, element: Tag) -> str:
        label = self.document.label_for(attribute_text(element, "id") or "")
        if label is not None:
            return self.document.text_of(label)

        aria_label = (attribute_text(element, "aria-label") or "").strip()
        if aria_label:
            return aria_label

        labelled_by = self._labelledby_text(element)
        if labelled_by:
            return labelled_by

        parent_label = element.find_parent("label")
        if parent_label is not None:
            return self.document.text_of(parent_label)

        return (attribute_text(element, "placeholder") or "").strip()

    def relevant_attributes(self, element: Tag) -> Dict[str, str]:
        attributes: Dict[str, str] = {}
        for name in element.attrs:
            if name in SNAPSHOT_ATTRIBUTES or name.startswith("aria-"):
                value = attribute_text(element, name)
                if value:
                    attributes[name] = value
        return attributes


def identify_fields(
    document: LiveDocument,
    candidates: Optional[Iterable[Tag]] = None,
    config: Optional[AutofillConfig] = None,
) -> List[FieldDescriptor]:
    return FieldIdentifier(document, config).identify(candidates)
