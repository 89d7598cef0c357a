"""Applies a rule's value to a single identified field."""

from __future__ import annotations

import asyncio
import logging
import math
import random
import re
from typing import Awaitable, Callable, Mapping, Optional, Sequence

from bs4 import Tag

from ..core.config import AutofillConfig
from ..core.dom import LiveDocument
from ..core.models import FieldDescriptor, FieldType, FillMode, Rule
from .templater import expand

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

TEXT_EVENTS = ("focus", "input", "keyup", "change", "blur")
CHANGE_EVENTS = ("change",)
RANDOM_OPTION = "?"
CHECKED_TOKENS = {"1", "true", "on"}
UNCHECKED_TOKENS = {"0", "false", "off"}
NUMBER = re.compile(r"^\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?\s*$")
QUOTES = re.compile(r"['\"]")
OPTION_INDEX = re.compile(r"^\s*[0-9]+\s*$")


def parse_number(text: str) -> Optional[float]:
    if not NUMBER.match(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None


def format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def compose_text(current: str, value: str, mode: FillMode) -> str:
    """New text for a text-like widget under ``mode``."""

    if mode is FillMode.APPEND:
        return current + value
    if mode is FillMode.PREPEND:
        return value + current
    if mode is FillMode.SURROUND:
        return value + current + value
    if mode in (FillMode.INCREMENT, FillMode.DECREMENT):
        number = parse_number(current)
        if number is None:
            return current
        step = 1 if mode is FillMode.INCREMENT else -1
        return format_number(number + step)
    return value


class FillExecutor:
    """Writes values into widgets and replays the matching browser events."""

    def __init__(
        self,
        config: Optional[AutofillConfig] = None,
        *,
        sleep: Optional[Sleep] = None,
        variables: Optional[Mapping[str, str]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or AutofillConfig()
        self._sleep = sleep or asyncio.sleep
        self.variables = dict(variables or {})
        self.rng = rng or random.Random()

    def should_skip(self, field: FieldDescriptor, rule: Rule, force_overwrite: bool) -> bool:
        if force_overwrite or rule.overwrite:
            return False
        return bool(field.current_value) and rule.fill_mode is not FillMode.REPLACE

    async def fill(self, field: FieldDescriptor, rule: Rule, force_overwrite: bool = False) -> bool:
        if self.should_skip(field, rule, force_overwrite):
            logger.debug("Keeping existing value of %s for rule %s", field.identifier, rule.rule_id)
            return False

        value = expand(rule.value_template, self.variables, self.rng)

        if field.field_type in (FieldType.TEXT_LIKE, FieldType.PASSWORD):
            return await self.fill_text(field, value, rule.fill_mode)
        if field.field_type is FieldType.SELECT_DROPDOWN:
            return await self.fill_select(field, value)
        if field.field_type is FieldType.CHECKBOX_OR_RADIO:
            return await self.fill_checkbox(field, value)
        return False

    async def fill_text(self, field: FieldDescriptor, value: str, mode: FillMode) -> bool:
        document, element = field.document, field.element
        new_value = compose_text(document.value_of(element), value, mode)
        document.set_value(element, new_value)
        await self.trigger_events(document, element, TEXT_EVENTS)
        return True

    async def fill_select(self, field: FieldDescriptor, value: str) -> bool:
        document, element = field.document, field.element
        options = document.options_of(element)

        if value == RANDOM_OPTION:
            if options:
                document.select_index(element, self.rng.randrange(len(options)))
        elif OPTION_INDEX.match(value):
            index = int(value)
            if index < len(options):
                document.select_index(element, index)
        else:
            wanted = QUOTES.sub("", value.lower())
            for index, option in enumerate(options):
                if wanted in (
                    document.option_text(option).lower(),
                    document.option_value(option).lower(),
                ):
                    document.select_index(element, index)
                    break

        await self.trigger_events(document, element, CHANGE_EVENTS)
        return True

    async def fill_checkbox(self, field: FieldDescriptor, value: str) -> bool:
        document, element = field.document, field.element
        wanted = value.strip().lower()

        if wanted in CHECKED_TOKENS:
            should_check = True
        elif wanted in UNCHECKED_TOKENS:
            should_check = False
        else:
            should_check = bool(wanted) and wanted in (
                document.value_of(element).lower(),
                field.label.lower(),
            )

        if document.is_checked(element) == should_check:
            return False

        document.set_checked(element, should_check)
        await self.trigger_events(document, element, CHANGE_EVENTS)
        return True

    async def trigger_events(self, document: LiveDocument, element: Tag, event_types: Sequence[str]) -> None:
        for event_type in event_types:
            document.dispatch_event(element, event_type)
            await self._sleep(self.config.event_delay)
