from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.turn import TurnResult


class SiteAgentError(Exception):
    """Base class for errors raised by the site configuration agent."""


class UnknownSectionTypeError(SiteAgentError, LookupError):
    def __init__(self, section_type: str) -> None:
        super().__init__(f"Unknown section type: {section_type}")
        self.section_type = section_type


class UnknownPageTemplateError(SiteAgentError, LookupError):
    def __init__(self, template_id: str) -> None:
        super().__init__(f"Unknown page template: {template_id}")
        self.template_id = template_id


class ToolRejectedError(SiteAgentError):
    """A tool request that cannot be applied to the document as it stands.

    Raised inside tool handlers and turned into a failed tool result so the
    model can read the message and try again.
    """


class ModelResponseError(SiteAgentError):
    """The model returned something that is neither a tool request nor a final answer."""


class ModelProviderError(SiteAgentError):
    """The hosted model call failed.

    ``partial_result`` holds the turn state reached before the failure so the
    caller can still persist the last good working document.
    """

    def __init__(self, message: str, *, partial_result: "TurnResult | None" = None) -> None:
        super().__init__(message)
        self.partial_result = partial_result


__all__ = [
    "SiteAgentError",
    "UnknownSectionTypeError",
    "UnknownPageTemplateError",
    "ModelResponseError",
    "ToolRejectedError",
    "ModelProviderError",
]
