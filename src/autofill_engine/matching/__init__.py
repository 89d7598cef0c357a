"""Rule pattern compilation and field matching."""

from .matcher import match_fields
from .pattern import Matcher, RegexMatcher, SubstringMatcher, compile_pattern

__all__ = ["Matcher", "RegexMatcher", "SubstringMatcher", "compile_pattern", "match_fields"]
