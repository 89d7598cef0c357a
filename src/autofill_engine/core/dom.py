"""Mutable document wrapper the engine reads from and writes to.

``LiveDocument`` keeps a BeautifulSoup tree together with the state a browser
would normally own for it: the page URL, the content documents of its frames
and the event listeners registered on its elements. Widget reads and writes
follow HTML form-control semantics so that the identifier and the fill
executor never have to poke at raw attributes themselves.

Tags compare by content in BeautifulSoup, so every lookup here relies on
identity (``is`` / ``id()``) instead of equality or hashing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

HTML_PARSER = "html.parser"
CONTENT_EDITABLE_VALUES = {"", "true", "plaintext-only"}
CHECKABLE_INPUT_TYPES = {"checkbox", "radio"}


class FrameAccessError(Exception):
    """Raised when the content document of a frame cannot be accessed."""


@dataclass
class DomEvent:
    type: str
    target: Tag
    bubbles: bool = True


EventListener = Callable[[DomEvent], None]


def attribute_text(element: Tag, name: str) -> Optional[str]:
    """Returns an attribute as text, joining multi-valued attributes."""

    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def input_type(element: Tag) -> str:
    if element.name != "input":
        return ""
    return (attribute_text(element, "type") or "text").strip().lower()


def is_content_editable(element: Tag) -> bool:
    value = attribute_text(element, "contenteditable")
    return value is not None and value.strip().lower() in CONTENT_EDITABLE_VALUES


def is_checkable(element: Tag) -> bool:
    return input_type(element) in CHECKABLE_INPUT_TYPES


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


class LiveDocument:
    """A parsed page plus the browser-side state the engine depends on."""

    def __init__(self, soup: BeautifulSoup, url: str = "") -> None:
        self.soup = soup
        self.url = url
        self.dispatched: List[DomEvent] = []
        self._frames: Dict[int, Tuple[Tag, Optional["LiveDocument"]]] = {}
        self._listeners: Dict[int, Tuple[Tag, Dict[str, List[EventListener]]]] = {}

    @classmethod
    def from_html(cls, html: str, url: str = "") -> "LiveDocument":
        return cls(BeautifulSoup(html, HTML_PARSER), url=url)

    def __repr__(self) -> str:
        return f"LiveDocument(url={self.url!r})"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def body(self) -> Optional[Tag]:
        return self.soup.body

    def select(self, selector: str) -> List[Tag]:
        return list(self.soup.select(selector))

    def get_element_by_id(self, element_id: str) -> Optional[Tag]:
        if not element_id:
            return None
        return self.soup.find(attrs={"id": element_id})

    def label_for(self, element_id: str) -> Optional[Tag]:
        if not element_id:
            return None
        return self.soup.find("label", attrs={"for": element_id})

    def text_of(self, element: Tag) -> str:
        return normalize_whitespace(element.get_text(" "))

    def strip_markup(self, element: Tag) -> str:
        """Text content of ``element`` with ``<script>`` blocks removed."""

        fragment = BeautifulSoup(element.decode_contents(), HTML_PARSER)
        for script in fragment.find_all("script"):
            script.decompose()
        return normalize_whitespace(fragment.get_text(" "))

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------
    def attach_frame(self, iframe: Tag, document: "LiveDocument") -> None:
        self._frames[id(iframe)] = (iframe, document)

    def restrict_frame(self, iframe: Tag) -> None:
        self._frames[id(iframe)] = (iframe, None)

    def frame_document(self, iframe: Tag) -> Optional["LiveDocument"]:
        entry = self._frames.get(id(iframe))
        if entry is None:
            return None
        _, document = entry
        if document is None:
            raise FrameAccessError(f"frame {attribute_text(iframe, 'src') or '<inline>'} is cross-origin")
        return document

    # ------------------------------------------------------------------
    # Widget state
    # ------------------------------------------------------------------
    def value_of(self, element: Tag) -> str:
        """Current value of a widget, mirroring ``element.value`` in a browser."""

        tag = element.name
        if tag == "input":
            value = attribute_text(element, "value")
            if value is None and is_checkable(element):
                return "on"
            return value or ""
        if tag == "textarea":
            return element.get_text()
        if tag == "select":
            index = self.selected_index(element)
            options = self.options_of(element)
            if 0 <= index < len(options):
                return self.option_value(options[index])
            return ""
        if tag == "iframe":
            frame = self.frame_document(element)
            if frame is None or frame.body is None:
                return ""
            return frame.strip_markup(frame.body)
        return self.strip_markup(element)

    def set_value(self, element: Tag, value: str) -> None:
        tag = element.name
        if tag == "input":
            element["value"] = value
            return
        if tag == "iframe":
            frame = self.frame_document(element)
            if frame is None or frame.body is None:
                raise FrameAccessError("frame has no accessible body")
            frame.body.string = value
            return
        element.string = value

    def is_checked(self, element: Tag) -> bool:
        if element.name == "input":
            return element.has_attr("checked")
        return (attribute_text(element, "aria-checked") or "").lower() == "true"

    def set_checked(self, element: Tag, checked: bool) -> None:
        if element.name != "input":
            element["aria-checked"] = "true" if checked else "false"
            return

        if not checked:
            if element.has_attr("checked"):
                del element["checked"]
            return

        if input_type(element) == "radio":
            for other in self._radio_group(element):
                if other is not element and other.has_attr("checked"):
                    del other["checked"]
        element["checked"] = ""

    def _radio_group(self, element: Tag) -> List[Tag]:
        name = attribute_text(element, "name")
        if not name:
            return [element]
        scope = element.find_parent("form") or self.soup
        return [
            candidate
            for candidate in scope.find_all("input", attrs={"name": name})
            if input_type(candidate) == "radio"
        ]

    def options_of(self, element: Tag) -> List[Tag]:
        if element.name == "select":
            return list(element.find_all("option"))
        return list(element.select('[role="option"]'))

    def option_text(self, option: Tag) -> str:
        label = attribute_text(option, "label")
        if option.name != "option" and label is None:
            label = attribute_text(option, "aria-label")
        text = self.text_of(option)
        return text or (label or "")

    def option_value(self, option: Tag) -> str:
        value = attribute_text(option, "value")
        if value is None:
            value = attribute_text(option, "data-value")
        if value is None:
            return self.option_text(option)
        return value

    def selected_index(self, element: Tag) -> int:
        options = self.options_of(element)
        for index, option in enumerate(options):
            if self._is_option_selected(option):
                return index
        if element.name == "select" and options and not element.has_attr("multiple"):
            return 0
        return -1

    def select_index(self, element: Tag, index: int) -> None:
        for position, option in enumerate(self.options_of(element)):
            selected = position == index
            if option.name == "option":
                if selected:
                    option["selected"] = ""
                elif option.has_attr("selected"):
                    del option["selected"]
            else:
                option["aria-selected"] = "true" if selected else "false"

    @staticmethod
    def _is_option_selected(option: Tag) -> bool:
        if option.name == "option":
            return option.has_attr("selected")
        return (attribute_text(option, "aria-selected") or "").lower() == "true"

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def add_event_listener(self, element: Tag, event_type: str, listener: EventListener) -> None:
        _, by_type = self._listeners.setdefault(id(element), (element, {}))
        by_type.setdefault(event_type, []).append(listener)

    def dispatch_event(self, element: Tag, event_type: str, *, bubbles: bool = True) -> DomEvent:
        """Delivers an event to ``element`` and, when bubbling, to its ancestors."""

        event = DomEvent(type=event_type, target=element, bubbles=bubbles)
        self.dispatched.append(event)

        path: List[Tag] = [element]
        if bubbles:
            path.extend(element.parents)

        for node in path:
            entry = self._listeners.get(id(node))
            if entry is None or entry[0] is not node:
                continue
            for listener in list(entry[1].get(event_type, ())):
                listener(event)
        return event

    def events_for(self, element: Tag) -> List[str]:
        return [event.type for event in self.dispatched if event.target is element]
