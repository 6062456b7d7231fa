from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from ..document import SiteDocument, clone_document, empty_document
from ..errors import SiteAgentError, UnknownPageTemplateError
from ..llm.base import ToolDefinition
from ..models.tools import (
    AddPageInput,
    AddSectionInput,
    CreateFullSiteInput,
    ListPagesInput,
    RemovePageInput,
    RemoveSectionInput,
    ReorderSectionsInput,
    ToolInput,
    ToolOutcome,
    UpdateNavigationInput,
    UpdatePageInput,
    UpdateSectionInput,
    UpdateThemeInput,
)
from ..page_templates import PageTemplateCatalog
from ..schema_registry import SchemaRegistry
from .context import ToolContext
from .definitions import build_tool_definitions
from .pages import add_page, list_pages, remove_page, update_navigation, update_page
from .sections import add_section, remove_section, reorder_sections, update_section
from .site import create_full_site, update_theme

logger = logging.getLogger(__name__)

Handler = Callable[[ToolContext, SiteDocument, Any], ToolOutcome]

TOOL_HANDLERS: Mapping[str, tuple[type[ToolInput], Handler]] = {
    "update_theme": (UpdateThemeInput, update_theme),
    "add_section": (AddSectionInput, add_section),
    "update_section": (UpdateSectionInput, update_section),
    "remove_section": (RemoveSectionInput, remove_section),
    "reorder_sections": (ReorderSectionsInput, reorder_sections),
    "create_full_site": (CreateFullSiteInput, create_full_site),
    "add_page": (AddPageInput, add_page),
    "remove_page": (RemovePageInput, remove_page),
    "update_page": (UpdatePageInput, update_page),
    "list_pages": (ListPagesInput, list_pages),
    "update_navigation": (UpdateNavigationInput, update_navigation),
}


def _format_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "input"
        problems.append(f"{location}: {item.get('msg')}")
    return "; ".join(problems)


class ToolExecutor:
    """Runs one named tool against a copy of a document.

    The caller's document is never modified. Expected problems (unknown
    ids, bad input, forbidden operations) come back as ``success=False``
    outcomes carrying the untouched input document.
    """

    def __init__(self, context: ToolContext | None = None) -> None:
        self._context = context or ToolContext()

    @property
    def registry(self) -> SchemaRegistry:
        return self._context.registry

    @property
    def templates(self) -> PageTemplateCatalog:
        return self._context.templates

    def definitions(self) -> list[ToolDefinition]:
        return build_tool_definitions(self._context.registry, self._context.templates.template_ids())

    def execute(self, name: str, tool_input: Mapping[str, Any] | None, document: SiteDocument | None) -> ToolOutcome:
        original = clone_document(document)
        entry = TOOL_HANDLERS.get(name)
        if entry is None:
            return ToolOutcome.failure(
                f"Unknown tool: {name}. Available tools: {', '.join(TOOL_HANDLERS)}", original
            )
        input_model, handler = entry

        try:
            payload = input_model.model_validate(dict(tool_input or {}))
        except ValidationError as exc:
            return ToolOutcome.failure(f"Invalid input for {name}: {_format_validation_error(exc)}", original)

        working = clone_document(document) if document is not None else empty_document(self._context.registry)
        try:
            outcome = handler(self._context, working, payload)
        except UnknownPageTemplateError as exc:
            return ToolOutcome.failure(
                f"{exc}. Available templates: {', '.join(self._context.templates.template_ids())}", original
            )
        except (SiteAgentError, LookupError) as exc:
            return ToolOutcome.failure(str(exc), original)
        except Exception as exc:
            logger.exception("Tool execution failed", extra={"tool": name})
            return ToolOutcome.failure(f"Error: {exc}", original)

        logger.info(
            "Tool executed",
            extra={"tool": name, "success": outcome.success, "changed": outcome.changed},
        )
        return outcome


__all__ = ["TOOL_HANDLERS", "ToolExecutor"]
