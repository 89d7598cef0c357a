"""Form field identification and rule-based autofill."""

from .core.dom import LiveDocument
from .core.models import FieldDescriptor, FieldType, FillError, FillMode, FillResult, Rule
from .core.rules import RuleStore, default_rule_store, load_rule_store
from .fill.orchestrator import AutofillPass, autofill_document
from .identify.identifier import FieldIdentifier, identify_fields

__all__ = [
    "AutofillPass",
    "FieldDescriptor",
    "FieldIdentifier",
    "FieldType",
    "FillError",
    "FillMode",
    "FillResult",
    "LiveDocument",
    "Rule",
    "RuleStore",
    "autofill_document",
    "default_rule_store",
    "identify_fields",
    "load_rule_store",
]
