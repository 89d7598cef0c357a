"""Compilation of rule patterns into matchers."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Pattern, Protocol

logger = logging.getLogger(__name__)

DELIMITED_REGEX = re.compile(r"^/(.+?)/([gimsuyv]*)$", re.DOTALL)
NAMED_GROUP = re.compile(r"\(\?<(?![=!])")

FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


class Matcher(Protocol):
    source: str

    def test(self, candidate: str) -> bool:
        ...


@dataclass(frozen=True)
class RegexMatcher:
    source: str
    regex: Pattern[str]

    def test(self, candidate: str) -> bool:
        return self.regex.search(candidate) is not None


@dataclass(frozen=True)
class SubstringMatcher:
    source: str

    def test(self, candidate: str) -> bool:
        return self.source.lower() in candidate.lower()


def _translate_flags(flags: str) -> int:
    compiled = 0
    for flag in flags:
        compiled |= FLAG_MAP.get(flag, 0)
    return compiled


def compile_pattern(source: str) -> Matcher:
    """Returns a regex matcher for ``/body/flags`` sources, else a substring matcher.

    A delimited source that is not a valid regular expression silently falls
    back to substring matching on the whole source text.
    """

    delimited = DELIMITED_REGEX.match(source)
    if delimited:
        body, flags = delimited.groups()
        try:
            return RegexMatcher(
                source=source,
                regex=re.compile(NAMED_GROUP.sub("(?P<", body), _translate_flags(flags)),
            )
        except re.error as exc:
            logger.debug("Pattern %r is not a valid regex (%s); using substring match", source, exc)

    return SubstringMatcher(source=source)
