"""Widget discovery and identifier synthesis."""

from .identifier import FieldIdentifier, classify_field, identify_fields
from .selectors import selector_identifier, xpath_identifier

__all__ = [
    "FieldIdentifier",
    "classify_field",
    "identify_fields",
    "selector_identifier",
    "xpath_identifier",
]
