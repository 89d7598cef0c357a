"""Centralized imports and fixtures-as-functions shared by the unit tests."""

import asyncio
import random

from autofill_engine.core.config import AutofillConfig  # type: ignore[import]
from autofill_engine.core.dom import LiveDocument  # type: ignore[import]
from autofill_engine.core.models import (  # type: ignore[import]
    FieldType,
    FillMode,
    Rule,
)
from autofill_engine.fill.executor import FillExecutor  # type: ignore[import]
from autofill_engine.identify.identifier import FieldIdentifier  # type: ignore[import]

NO_DELAY = AutofillConfig(event_delay=0.0)


def build_document(html: str, url: str = "https://example.com/form") -> LiveDocument:
    return LiveDocument.from_html(html, url=url)


def identify(document: LiveDocument):
    return FieldIdentifier(document, NO_DELAY).identify()


def field_by_name(document: LiveDocument, name: str):
    for descriptor in identify(document):
        if descriptor.attributes.get("name") == name:
            return descriptor
    raise LookupError(name)


def build_executor(seed: int = 7, variables=None) -> FillExecutor:
    return FillExecutor(NO_DELAY, variables=variables, rng=random.Random(seed))


def run(coroutine):
    return asyncio.run(coroutine)


def make_rule(pattern: str = '"email"', value: str = "user@example.com", **overrides) -> Rule:
    return Rule(rule_id=overrides.pop("rule_id", "r1"), pattern=pattern, value_template=value, **overrides)


__all__ = [
    "FieldType",
    "FillMode",
    "LiveDocument",
    "NO_DELAY",
    "Rule",
    "build_document",
    "build_executor",
    "field_by_name",
    "identify",
    "make_rule",
    "run",
]
