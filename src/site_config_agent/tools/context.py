from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..document import (
    SiteDocument,
    describe_sections,
    ensure_multi_page,
    find_page,
    home_page,
    is_legacy,
    page_label,
    pages,
)
from ..errors import ToolRejectedError
from ..page_templates import DEFAULT_PAGE_TEMPLATE_CATALOG, PageTemplateCatalog
from ..schema_registry import DEFAULT_REGISTRY, SchemaRegistry


@dataclass(frozen=True)
class ToolContext:
    registry: SchemaRegistry = DEFAULT_REGISTRY
    templates: PageTemplateCatalog = field(default_factory=lambda: DEFAULT_PAGE_TEMPLATE_CATALOG)


def describe_pages(document: SiteDocument) -> str:
    return ", ".join(page_label(page) for page in pages(document)) or "none"


def require_page(document: SiteDocument, page_id: str) -> dict[str, Any]:
    """Look up a page, converting a legacy document first."""
    ensure_multi_page(document)
    page = find_page(document, page_id)
    if page is None:
        raise ToolRejectedError(f"Page not found: {page_id}. Available pages: {describe_pages(document)}")
    return page


def target_sections(document: SiteDocument, page_id: str | None) -> tuple[str, list[dict[str, Any]]]:
    """The section list a tool writes to, with a label for messages.

    Without ``page_id`` this is the root list of a legacy document or the
    home page of a multi-page one.
    """
    if page_id:
        page = require_page(document, page_id)
        return page_label(page), page.setdefault("sections", [])
    if is_legacy(document):
        sections = document.get("sections")
        if not isinstance(sections, list):
            sections = document["sections"] = []
        return "the site", sections
    home = home_page(document)
    if home is None:
        raise ToolRejectedError("The document has no pages")
    return page_label(home), home.setdefault("sections", [])


def section_not_found(document: SiteDocument, reference: str) -> ToolRejectedError:
    available = describe_sections(document) or "none"
    return ToolRejectedError(f"Section not found: {reference}. Available sections: {available}")


__all__ = [
    "ToolContext",
    "describe_pages",
    "require_page",
    "section_not_found",
    "target_sections",
]
