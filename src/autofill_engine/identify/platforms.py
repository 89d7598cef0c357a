"""Detection of the third-party form platforms that need bespoke handling."""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Tuple

from bs4 import Tag

from ..core.dom import LiveDocument, attribute_text

GOOGLE_FORMS_URL = "docs.google.com/forms"
MICROSOFT_FORMS_URL = re.compile(r"forms\.(microsoft|office)\.com/pages/responsepage", re.IGNORECASE)
QUESTION_ITEM = "questionItem"


class FormPlatform(Enum):
    GOOGLE_FORMS = "google-forms"
    MICROSOFT_FORMS = "microsoft-forms"


PLATFORM_SELECTORS = {
    FormPlatform.GOOGLE_FORMS: (
        'div[jsaction][aria-checked="true"]',
        'div[jsaction][aria-selected="true"]',
    ),
    FormPlatform.MICROSOFT_FORMS: (
        f'div[data-automation-id="{QUESTION_ITEM}"] div[aria-checked="true"]',
        f'div[data-automation-id="{QUESTION_ITEM}"] [aria-haspopup] [aria-label]',
    ),
}


def detect_platform(document: LiveDocument) -> Optional[FormPlatform]:
    url = document.url or ""
    body = document.body
    if body is not None and body.has_attr("jsaction") and GOOGLE_FORMS_URL in url.lower():
        return FormPlatform.GOOGLE_FORMS
    if MICROSOFT_FORMS_URL.search(url):
        return FormPlatform.MICROSOFT_FORMS
    return None


def platform_selectors(platform: Optional[FormPlatform]) -> Tuple[str, ...]:
    if platform is None:
        return ()
    return PLATFORM_SELECTORS[platform]


def _closest(element: Tag, predicate) -> Optional[Tag]:
    node: Optional[Tag] = element
    while node is not None and node.name != "[document]":
        if predicate(node):
            return node
        node = node.parent
    return None


def _with_role(role: str):
    return lambda node: attribute_text(node, "role") == role


def _is_question_item(node: Tag) -> bool:
    return attribute_text(node, "data-automation-id") == QUESTION_ITEM


def is_custom_form_element(platform: Optional[FormPlatform], element: Tag) -> bool:
    if platform is FormPlatform.GOOGLE_FORMS:
        return (
            element.has_attr("aria-checked")
            or element.has_attr("aria-selected")
            or attribute_text(element, "role") in {"listbox", "option"}
        )
    if platform is FormPlatform.MICROSOFT_FORMS:
        return _closest(element, _is_question_item) is not None
    return False


def custom_form_label(document: LiveDocument, platform: Optional[FormPlatform], element: Tag) -> Optional[str]:
    if platform is FormPlatform.GOOGLE_FORMS:
        listbox = _closest(element, _with_role("listbox"))
        if listbox is not None:
            label = attribute_text(listbox, "aria-label") or attribute_text(listbox, "aria-labelledby")
            if label:
                return label.strip()

        if _closest(element, _with_role("option")) is not None:
            label = attribute_text(element, "aria-label") or document.text_of(element)
            return label.strip() or None

    if platform is FormPlatform.MICROSOFT_FORMS:
        question = _closest(element, _is_question_item)
        if question is not None:
            heading = question.find(attrs={"role": "heading"})
            if heading is not None:
                return document.text_of(heading) or None

    return None
