"""Selector and positional-path identifiers for widgets without readable names."""

from __future__ import annotations

import logging
import re
from typing import Iterator, Optional

import soupsieve
from bs4 import Tag

from ..core.config import AutofillConfig
from ..core.dom import LiveDocument, attribute_text

logger = logging.getLogger(__name__)

SELECTOR_ATTRIBUTES = {"autocomplete", "name", "placeholder", "role", "type"}
SELECTOR_ATTRIBUTE_PREFIXES = ("aria-", "data-")
LINE_BREAKS = re.compile(r"[\r\n]+")


def escape_attribute_value(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return LINE_BREAKS.sub(" ", escaped)


def _selector_attributes(element: Tag) -> Iterator[tuple[str, str]]:
    for name in element.attrs:
        if name in SELECTOR_ATTRIBUTES or name.startswith(SELECTOR_ATTRIBUTE_PREFIXES):
            yield name, attribute_text(element, name) or ""


def is_selector_unique(document: LiveDocument, selector: str, element: Tag) -> bool:
    """``True`` when ``selector`` matches exactly one node and that node is ``element``."""

    try:
        matches = document.select(selector)
    except Exception:
        logger.debug("Selector %r could not be evaluated", selector, exc_info=True)
        return False
    return len(matches) == 1 and matches[0] is element


def unique_attribute_selector(document: LiveDocument, element: Tag) -> Optional[str]:
    for name, value in _selector_attributes(element):
        selector = f'[{name}="{escape_attribute_value(value)}"]'
        if is_selector_unique(document, selector, element):
            return selector
    return None


def xpath_identifier(element: Tag) -> str:
    """Positional path from the root, e.g. ``/html/body/div[2]/input``."""

    steps: list[str] = []
    node: Optional[Tag] = element
    while node is not None and node.name != "[document]":
        preceding = len(node.find_previous_siblings(node.name))
        steps.append(f"{node.name}[{preceding + 1}]" if preceding else node.name)
        node = node.parent
    return "/" + "/".join(reversed(steps))


def selector_identifier(
    document: LiveDocument,
    element: Tag,
    config: Optional[AutofillConfig] = None,
) -> str:
    config = config or AutofillConfig()

    element_id = attribute_text(element, "id")
    if element_id and not config.is_problematic_site(document.url):
        return f"#{soupsieve.escape(element_id)}"

    return unique_attribute_selector(document, element) or xpath_identifier(element)
