"""Page and navigation tools.

Every tool here works on the multi-page shape; a legacy document is
converted on the way in (``list_pages`` excepted, which only reads).
"""
from __future__ import annotations

import copy
from typing import Any

from ..document import (
    DEFAULT_NAVIGATION_STYLE,
    SiteDocument,
    default_navigation,
    ensure_multi_page,
    home_page,
    is_legacy,
    pages,
    slugify,
    unique_slug,
)
from ..errors import ToolRejectedError
from ..models.tools import (
    AddPageInput,
    ListPagesInput,
    RemovePageInput,
    ToolOutcome,
    UpdateNavigationInput,
    UpdatePageInput,
)
from ..schema_registry import DEFAULT_SITE_NAME
from .context import ToolContext, describe_pages, require_page


def _taken_slugs(document: SiteDocument, *, exclude: dict[str, Any] | None = None) -> set[str]:
    return {page.get("slug") for page in pages(document) if page is not exclude and isinstance(page.get("slug"), str)}


def _navigation_links(document: SiteDocument) -> list[dict[str, Any]] | None:
    navigation = document.get("navigation")
    if not isinstance(navigation, dict):
        return None
    links = navigation.get("links")
    if not isinstance(links, list):
        links = navigation["links"] = []
    return links


def add_page(context: ToolContext, document: SiteDocument, payload: AddPageInput) -> ToolOutcome:
    ensure_multi_page(document)
    site_name = document.get("siteName") or DEFAULT_SITE_NAME
    page = context.templates.instantiate(payload.template_id, site_name, name=payload.name)

    requested = slugify(payload.slug) if payload.slug is not None else page["slug"]
    page["slug"] = unique_slug(requested or slugify(payload.template_id), _taken_slugs(document) | {""})
    document["pages"].append(page)

    links = _navigation_links(document)
    if links is not None:
        links.append({"pageId": page["id"], "label": page["name"]})

    return ToolOutcome(
        success=True,
        message=(
            f'Added page "{page["name"]}" ({page["id"]}) at /{page["slug"]} '
            f"with {len(page['sections'])} sections"
        ),
        document=document,
        changed=True,
    )


def remove_page(context: ToolContext, document: SiteDocument, payload: RemovePageInput) -> ToolOutcome:
    page = require_page(document, payload.page_id)
    if page.get("isHome"):
        raise ToolRejectedError("The home page cannot be removed")
    document["pages"] = [candidate for candidate in document["pages"] if candidate is not page]

    links = _navigation_links(document)
    if links is not None:
        links[:] = [link for link in links if not (isinstance(link, dict) and link.get("pageId") == page.get("id"))]

    return ToolOutcome(
        success=True,
        message=f'Removed page "{page.get("name")}" ({page.get("id")})',
        document=document,
        previous_content=copy.deepcopy(page),
        changed=True,
    )


def update_page(context: ToolContext, document: SiteDocument, payload: UpdatePageInput) -> ToolOutcome:
    page = require_page(document, payload.page_id)
    previous = {"name": page.get("name"), "slug": page.get("slug")}
    notes: list[str] = []

    if payload.slug is not None:
        slug = slugify(payload.slug)
        if page.get("isHome"):
            if slug != "":
                raise ToolRejectedError("The home page slug cannot be changed")
        elif not slug:
            raise ToolRejectedError(f"Invalid slug: {payload.slug!r}")
        elif slug in _taken_slugs(document, exclude=page):
            raise ToolRejectedError(f"Slug '{slug}' is already used by another page")
        elif slug != page.get("slug"):
            page["slug"] = slug
            notes.append(f"slug: /{previous['slug']} → /{slug}")

    if payload.name is not None and payload.name != page.get("name"):
        page["name"] = payload.name
        notes.append(f'name: "{previous["name"]}" → "{payload.name}"')
        for link in _navigation_links(document) or []:
            if isinstance(link, dict) and link.get("pageId") == page.get("id") and link.get("label") == previous["name"]:
                link["label"] = payload.name

    if not notes:
        return ToolOutcome(
            success=True,
            message=f"No changes to page {page.get('id')}",
            document=document,
            previous_content={},
            changed=False,
        )
    return ToolOutcome(
        success=True,
        message=f"Updated page {page.get('id')}. Previous values:\n" + "\n".join(notes),
        document=document,
        previous_content={key: value for key, value in previous.items() if page.get(key) != value},
        changed=True,
    )


def list_pages(context: ToolContext, document: SiteDocument, payload: ListPagesInput) -> ToolOutcome:
    if is_legacy(document):
        sections = document.get("sections") if isinstance(document.get("sections"), list) else []
        lines = [f"Single-page site (not yet converted) with {len(sections)} sections:"]
        lines.extend(f"  - {section.get('id')} ({section.get('type')})" for section in sections if isinstance(section, dict))
        return ToolOutcome(success=True, message="\n".join(lines), document=document, changed=False)

    lines = []
    for page in pages(document):
        home = " [home]" if page.get("isHome") else ""
        sections = page.get("sections") if isinstance(page.get("sections"), list) else []
        lines.append(f"- {page.get('name')} ({page.get('id')}) /{page.get('slug', '')}{home}")
        lines.extend(
            f"    - {section.get('id')} ({section.get('type')})" for section in sections if isinstance(section, dict)
        )
    return ToolOutcome(success=True, message="Pages:\n" + "\n".join(lines), document=document, changed=False)


def update_navigation(context: ToolContext, document: SiteDocument, payload: UpdateNavigationInput) -> ToolOutcome:
    ensure_multi_page(document)
    styles = context.registry.list_navigation_styles()
    if payload.style is not None and payload.style not in styles:
        raise ToolRejectedError(f"Invalid navigation style: {payload.style}. Available styles: {', '.join(styles)}")
    known = {page.get("id") for page in pages(document)}
    missing = [link.page_id for link in payload.links if link.page_id not in known]
    if missing:
        raise ToolRejectedError(
            f"Unknown page ids in links: {', '.join(missing)}. Available pages: {describe_pages(document)}"
        )

    navigation = document.get("navigation")
    if not isinstance(navigation, dict):
        home = home_page(document)
        navigation = default_navigation(document.get("siteName") or DEFAULT_SITE_NAME, [home] if home else [])
        document["navigation"] = navigation
    previous = copy.deepcopy({"style": navigation.get("style"), "links": navigation.get("links")})
    navigation["links"] = [{"pageId": link.page_id, "label": link.label} for link in payload.links]
    navigation["style"] = payload.style or navigation.get("style") or DEFAULT_NAVIGATION_STYLE

    labels = ", ".join(link["label"] for link in navigation["links"]) or "no links"
    return ToolOutcome(
        success=True,
        message=f"Navigation updated ({navigation['style']}): {labels}",
        document=document,
        previous_content=previous,
        changed=True,
    )


__all__ = ["add_page", "list_pages", "remove_page", "update_navigation", "update_page"]
