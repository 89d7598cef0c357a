"""Shared data structures used across the autofill pipeline."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from bs4 import Tag

if TYPE_CHECKING:  # pragma: no cover - import-time type checking only
    from .dom import LiveDocument


class FieldType(Enum):
    """Closed set of widget shapes the fill executor knows how to drive."""

    TEXT_LIKE = "text"
    PASSWORD = "password"
    SELECT_DROPDOWN = "select"
    CHECKBOX_OR_RADIO = "checkbox"


class FillMode(Enum):
    """How a templated value is composed with the widget's current value.

    Values are the numeric codes used by the rule store.
    """

    REPLACE = 0
    APPEND = 2
    PREPEND = 3
    SURROUND = 4
    INCREMENT = 5
    DECREMENT = 6

    @classmethod
    def parse(cls, raw: Union["FillMode", int, str, None]) -> "FillMode":
        if raw is None or raw == "":
            return cls.REPLACE
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, bool):
            raise ValueError(f"invalid fill mode: {raw!r}")
        if isinstance(raw, int):
            return cls(raw)

        text = str(raw).strip()
        if text.lstrip("-").isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"invalid fill mode: {raw!r}") from None


@dataclass(slots=True)
class FieldDescriptor:
    """One fillable widget discovered during an identification pass."""

    element: Tag
    document: "LiveDocument"
    identifier: str
    field_type: FieldType
    current_value: str = ""
    label: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def tag(self) -> str:
        return (self.element.name or "").lower()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "type": self.field_type.value,
            "tag": self.tag,
            "value": self.current_value,
            "label": self.label,
            "attributes": dict(self.attributes),
        }


@dataclass(frozen=True)
class Rule:
    """A pattern -> value mapping supplied by the host application."""

    rule_id: str
    pattern: str
    value_template: str
    fill_mode: FillMode = FillMode.REPLACE
    overwrite: bool = False
    site: str = ""
    category: Optional[str] = None
    enabled: bool = True


@dataclass(frozen=True)
class FillError:
    """Failure recorded for a single field/rule pair."""

    field: str
    rule: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "rule": self.rule, "message": self.message}


@dataclass
class FillResult:
    """Summary produced by one autofill pass."""

    filled: int = 0
    errors: List[FillError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filled": self.filled,
            "errors": [error.to_dict() for error in self.errors],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4)

    def save(self, path: Path) -> None:
        path.write_text(self.to_json(), encoding="utf-8")
