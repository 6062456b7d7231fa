from __future__ import annotations

from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ValidationReport(BaseModel):
    valid: bool
    errors: Sequence[str] = Field(default_factory=list)

    def summary(self, limit: int = 5) -> str:
        shown = list(self.errors[:limit])
        if len(self.errors) > limit:
            shown.append(f"... and {len(self.errors) - limit} more")
        return "; ".join(shown)


class SanitizeReport(BaseModel):
    """A repaired document plus the sections that could not be kept."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    document: dict[str, Any]
    dropped_sections: list[str] = Field(default_factory=list)

    def describe(self) -> str:
        if not self.dropped_sections:
            return ""
        return "Removed sections with unknown types: " + ", ".join(self.dropped_sections)


__all__ = ["SanitizeReport", "ValidationReport"]
