"""Value templating, per-field filling and pass orchestration."""

from .executor import FillExecutor
from .orchestrator import AutofillPass, autofill_document
from .templater import expand

__all__ = ["AutofillPass", "FillExecutor", "autofill_document", "expand"]
