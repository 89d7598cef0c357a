"""Selection of the fields a rule applies to."""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..core.models import FieldDescriptor, Rule
from .pattern import Matcher, compile_pattern

MATCHED_ATTRIBUTES = ("name", "id", "placeholder")


def candidate_strings(field: FieldDescriptor) -> List[str]:
    values = [field.identifier, field.label]
    values.extend(field.attributes.get(name, "") for name in MATCHED_ATTRIBUTES)
    return [value for value in values if value]


def field_matches(field: FieldDescriptor, matcher: Matcher) -> bool:
    return any(matcher.test(value) for value in candidate_strings(field))


def match_fields(
    rule: Rule,
    fields: Iterable[FieldDescriptor],
    matcher: Optional[Matcher] = None,
) -> List[FieldDescriptor]:
    matcher = matcher or compile_pattern(rule.pattern)
    return [field for field in fields if field_matches(field, matcher)]
