"""Helpers over the plain JSON site document.

A document is a ``dict`` tree so it round-trips through JSON unchanged and so
malformed payloads can still be represented long enough to be repaired.
Two shapes are supported: the multi-page shape (``pages`` + ``navigation``)
and the legacy single-page shape whose ``sections`` sit at the root.
"""
from __future__ import annotations

import copy
import re
import uuid
from datetime import date
from typing import Any, Iterator, MutableMapping

from .schema_registry import DEFAULT_SITE_NAME, DEFAULT_STARTER_SECTIONS, SchemaRegistry

SiteDocument = MutableMapping[str, Any]

HOME_PAGE_ID = "home"
DEFAULT_NAVIGATION_STYLE = "fixed-top"

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")


def clone_document(document: SiteDocument | None) -> dict[str, Any] | None:
    return copy.deepcopy(dict(document)) if document is not None else None


def is_legacy(document: SiteDocument) -> bool:
    return not isinstance(document.get("pages"), list)


def generate_section_id(section_type: str) -> str:
    return f"{section_type}-{uuid.uuid4().hex[:8]}"


def generate_page_id() -> str:
    return f"page-{uuid.uuid4().hex[:8]}"


def slugify(value: str) -> str:
    return _SLUG_INVALID.sub("-", value.lower()).strip("-")


def unique_slug(base: str, taken: set[str]) -> str:
    if base not in taken:
        return base
    counter = 1
    while f"{base}-{counter}" in taken:
        counter += 1
    return f"{base}-{counter}"


def copyright_line(site_name: str) -> str:
    return f"© {date.today().year} {site_name}. All rights reserved."


def renumber(sections: list[dict[str, Any]]) -> None:
    for index, section in enumerate(sections):
        section["order"] = index


def new_section(
    registry: SchemaRegistry,
    section_type: str,
    content: MutableMapping[str, Any] | None = None,
) -> dict[str, Any]:
    definition = registry.require_definition(section_type)
    return {
        "id": generate_section_id(section_type),
        "type": section_type,
        "order": 0,
        "visible": True,
        "content": definition.new_content(content),
    }


def default_navigation(site_name: str, pages: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "style": DEFAULT_NAVIGATION_STYLE,
        "logo": {"url": None, "alt": site_name},
        "links": [{"pageId": page["id"], "label": page["name"]} for page in pages],
    }


def home_page_stub(sections: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {
        "id": HOME_PAGE_ID,
        "name": "Home",
        "slug": "",
        "isHome": True,
        "sections": sections if sections is not None else [],
    }


def empty_document(registry: SchemaRegistry, site_name: str = DEFAULT_SITE_NAME) -> dict[str, Any]:
    home = home_page_stub()
    return {
        "siteName": site_name,
        "theme": registry.default_theme(),
        "pages": [home],
        "navigation": default_navigation(site_name, [home]),
        "footer": {"companyName": site_name, "copyright": copyright_line(site_name)},
    }


def new_document(
    registry: SchemaRegistry,
    site_name: str,
    theme_preset: str | None = None,
) -> dict[str, Any]:
    """A fresh multi-page document with the starter sections on its home page."""
    document = empty_document(registry, site_name)
    if theme_preset:
        preset = registry.theme_preset(theme_preset)
        if preset:
            preset.pop("name", None)
            document["theme"].update(preset)
    sections = [new_section(registry, section_type) for section_type in DEFAULT_STARTER_SECTIONS]
    for section in sections:
        if section["type"] == "footer":
            section["content"]["companyName"] = site_name
            section["content"]["copyright"] = copyright_line(site_name)
    renumber(sections)
    document["pages"][0]["sections"] = sections
    return document


def ensure_multi_page(document: SiteDocument) -> SiteDocument:
    """Convert a legacy single-page document in place; multi-page documents pass through."""
    if not is_legacy(document):
        return document
    site_name = document.get("siteName") or DEFAULT_SITE_NAME
    sections = document.pop("sections", None)
    if not isinstance(sections, list):
        sections = []
    home = home_page_stub(sections)
    footer = next(
        (
            section.get("content")
            for section in sections
            if isinstance(section, dict) and section.get("type") == "footer"
        ),
        None,
    )
    document["pages"] = [home]
    document.setdefault("navigation", default_navigation(site_name, [home]))
    document.setdefault(
        "footer",
        copy.deepcopy(footer)
        if isinstance(footer, dict)
        else {"companyName": site_name, "copyright": copyright_line(site_name)},
    )
    return document


def pages(document: SiteDocument) -> list[dict[str, Any]]:
    value = document.get("pages")
    if not isinstance(value, list):
        return []
    return [page for page in value if isinstance(page, dict)]


def find_page(document: SiteDocument, page_id: str) -> dict[str, Any] | None:
    return next((page for page in pages(document) if page.get("id") == page_id), None)


def home_page(document: SiteDocument) -> dict[str, Any] | None:
    all_pages = pages(document)
    return next((page for page in all_pages if page.get("isHome")), all_pages[0] if all_pages else None)


def page_label(page: MutableMapping[str, Any]) -> str:
    return f"{page.get('name', page.get('id'))} ({page.get('id')})"


def section_scopes(document: SiteDocument) -> list[tuple[str, list[dict[str, Any]]]]:
    """Every section container, home page first; legacy documents have one root scope."""
    if is_legacy(document):
        sections = document.get("sections")
        if not isinstance(sections, list):
            sections = document["sections"] = []
        return [("the site", sections)]
    home = home_page(document)
    ordered = ([home] if home else []) + [page for page in pages(document) if page is not home]
    return [(page_label(page), page.setdefault("sections", [])) for page in ordered]


def iter_sections(document: SiteDocument) -> Iterator[dict[str, Any]]:
    if is_legacy(document):
        containers = [document.get("sections")]
    else:
        containers = [page.get("sections") for page in pages(document)]
    for sections in containers:
        if not isinstance(sections, list):
            continue
        for section in sections:
            if isinstance(section, dict):
                yield section


def is_empty(document: SiteDocument | None) -> bool:
    if document is None:
        return True
    return next(iter_sections(document), None) is None


def describe_sections(document: SiteDocument) -> str:
    return ", ".join(f"{section.get('id')} ({section.get('type')})" for section in iter_sections(document))


__all__ = [
    "DEFAULT_NAVIGATION_STYLE",
    "HOME_PAGE_ID",
    "SiteDocument",
    "clone_document",
    "copyright_line",
    "default_navigation",
    "describe_sections",
    "empty_document",
    "ensure_multi_page",
    "find_page",
    "generate_page_id",
    "generate_section_id",
    "home_page",
    "home_page_stub",
    "is_empty",
    "is_legacy",
    "iter_sections",
    "new_document",
    "new_section",
    "page_label",
    "pages",
    "renumber",
    "section_scopes",
    "slugify",
    "unique_slug",
]
