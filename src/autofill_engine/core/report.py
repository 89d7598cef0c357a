"""Serializable artifacts produced by identification and fill passes."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .models import FieldDescriptor, FillError, FillResult


@dataclass
class IdentificationReport:
    """Fields found on one page, ready to be written to disk."""

    url: str = ""
    fields: List[FieldDescriptor] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        # Imported lazily: matching depends on core, not the other way round.
        from ..matching.semantic import infer_semantic_type

        entries = []
        for descriptor in self.fields:
            entry = descriptor.to_dict()
            entry["semantic_type"] = infer_semantic_type(descriptor)
            entries.append(entry)
        return {"url": self.url, "fields": entries}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4)

    def save(self, path: Path) -> None:
        path.write_text(self.to_json(), encoding="utf-8")


__all__ = ["FillError", "FillResult", "IdentificationReport"]
