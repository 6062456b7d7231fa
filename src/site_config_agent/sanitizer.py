from __future__ import annotations

import copy
import logging
import time
from typing import Any, Mapping

from .document import (
    DEFAULT_NAVIGATION_STYLE,
    copyright_line,
    default_navigation,
    home_page_stub,
    slugify,
    unique_slug,
)
from .models.validation import SanitizeReport
from .schema_registry import (
    DEFAULT_REGISTRY,
    DEFAULT_SITE_NAME,
    THEME_COLOR_FIELDS,
    FieldRule,
    SchemaRegistry,
)
from .validator import SITE_NAME_MAX_LENGTH, field_errors, is_hex_color

logger = logging.getLogger(__name__)


class DocumentSanitizer:
    """Best-effort repair of a document that failed validation.

    Only missing or malformed structure is touched. Keys the schema does not
    know about are carried through untouched. Sections whose type is not in
    the registry cannot be repaired and are dropped.
    """

    def __init__(self, registry: SchemaRegistry = DEFAULT_REGISTRY, clock=time.time) -> None:
        self._registry = registry
        self._clock = clock

    def sanitize(self, document: Any) -> dict[str, Any]:
        return self.repair(document).document

    def repair(self, document: Any) -> SanitizeReport:
        """Like :meth:`sanitize`, also listing every section dropped for an unknown type."""
        stamp = str(int(self._clock() * 1000))
        dropped: list[str] = []
        sanitized = copy.deepcopy(document) if isinstance(document, dict) else {}

        site_name = sanitized.get("siteName")
        if not isinstance(site_name, str) or not site_name.strip():
            sanitized["siteName"] = DEFAULT_SITE_NAME
        elif len(site_name) > SITE_NAME_MAX_LENGTH:
            sanitized["siteName"] = site_name[:SITE_NAME_MAX_LENGTH]
        sanitized["theme"] = self._repair_theme(sanitized.get("theme"))

        footer = sanitized.get("footer")
        if "footer" in sanitized and not isinstance(footer, dict):
            sanitized["footer"] = {
                "companyName": sanitized["siteName"],
                "copyright": copyright_line(sanitized["siteName"]),
            }

        pages = sanitized.get("pages")
        if "pages" in sanitized and not isinstance(pages, list):
            logger.warning("Dropping malformed pages value", extra={"pages_type": type(pages).__name__})
            sanitized.pop("pages")
            pages = None

        if pages is None:
            sanitized["sections"] = self._repair_sections(sanitized.get("sections"), stamp, "site", dropped)
        else:
            sanitized["pages"] = self._repair_pages(sanitized, stamp, dropped)
            sanitized["navigation"] = self._repair_navigation(
                sanitized.get("navigation"), sanitized["pages"], sanitized["siteName"]
            )
        return SanitizeReport(document=sanitized, dropped_sections=dropped)

    def _repair_theme(self, theme: Any) -> dict[str, Any]:
        defaults = self._registry.default_theme()
        if not isinstance(theme, dict):
            return defaults
        repaired = dict(theme)
        for name in THEME_COLOR_FIELDS:
            if name not in repaired or (repaired[name] is not None and not is_hex_color(repaired[name])):
                repaired[name] = defaults[name]
        font = repaired.get("fontFamily")
        if not isinstance(font, str) or not font:
            repaired["fontFamily"] = defaults["fontFamily"]
        return repaired

    def _repair_pages(self, document: dict[str, Any], stamp: str, dropped: list[str]) -> list[dict[str, Any]]:
        raw_pages = [page for page in document["pages"] if isinstance(page, dict)]
        legacy_sections = document.pop("sections", None)
        if not raw_pages:
            raw_pages = [home_page_stub(legacy_sections if isinstance(legacy_sections, list) else [])]
        elif isinstance(legacy_sections, list) and legacy_sections:
            logger.warning(
                "Document has both pages and root sections; keeping root sections on the home page",
                extra={"section_count": len(legacy_sections)},
            )
            home = next((page for page in raw_pages if page.get("isHome") is True), raw_pages[0])
            existing = home.get("sections") if isinstance(home.get("sections"), list) else []
            home["sections"] = existing + legacy_sections

        home_index = next(
            (index for index, page in enumerate(raw_pages) if page.get("isHome") is True), 0
        )
        seen_ids: set[str] = set()
        taken_slugs: set[str] = {""}
        repaired: list[dict[str, Any]] = []
        for index, page in enumerate(raw_pages):
            page = dict(page)
            page_id = page.get("id")
            if not isinstance(page_id, str) or not page_id or page_id in seen_ids:
                page_id = f"page-{stamp}-{index}"
                page["id"] = page_id
            seen_ids.add(page_id)
            if not isinstance(page.get("name"), str) or not page.get("name"):
                page["name"] = "Home" if index == home_index else f"Page {index + 1}"
            page["isHome"] = index == home_index
            if page["isHome"]:
                page["slug"] = ""
            else:
                slug = page.get("slug")
                if not isinstance(slug, str) or not slug:
                    slug = slugify(page["name"]) or f"page-{index + 1}"
                page["slug"] = unique_slug(slug, taken_slugs)
                taken_slugs.add(page["slug"])
            page["sections"] = self._repair_sections(page.get("sections"), stamp, page_id, dropped)
            repaired.append(page)
        return repaired

    def _repair_navigation(
        self, navigation: Any, pages: list[dict[str, Any]], site_name: str
    ) -> dict[str, Any]:
        if not isinstance(navigation, dict):
            return default_navigation(site_name, [page for page in pages if page["isHome"]])
        repaired = dict(navigation)
        if repaired.get("style") not in self._registry.list_navigation_styles():
            repaired["style"] = DEFAULT_NAVIGATION_STYLE
        names = {page["id"]: page["name"] for page in pages}
        links = repaired.get("links")
        kept: list[dict[str, Any]] = []
        for link in links if isinstance(links, list) else []:
            if not isinstance(link, dict):
                continue
            page_id = link.get("pageId")
            if not isinstance(page_id, str) or page_id not in names:
                continue
            link = dict(link)
            if not isinstance(link.get("label"), str) or not link.get("label"):
                link["label"] = names[page_id]
            kept.append(link)
        repaired["links"] = kept
        return repaired

    def _repair_sections(
        self, sections: Any, stamp: str, scope: str, dropped: list[str]
    ) -> list[dict[str, Any]]:
        if not isinstance(sections, list):
            return []
        candidates: list[tuple[Any, int, dict[str, Any]]] = []
        seen_ids: set[str] = set()
        for index, section in enumerate(sections):
            if not isinstance(section, dict):
                continue
            definition = self._registry.get_definition(section.get("type"))
            if definition is None:
                logger.warning(
                    "Dropping section with unknown type",
                    extra={"scope": scope, "section_type": section.get("type"), "section_id": section.get("id")},
                )
                dropped.append(f"{section.get('id') or 'unknown'} ({section.get('type')})")
                continue
            section = dict(section)
            section_id = section.get("id")
            if not isinstance(section_id, str) or not section_id or section_id in seen_ids:
                section["id"] = f"{definition.type}-{stamp}-{index}"
            seen_ids.add(section["id"])
            if not isinstance(section.get("visible"), bool):
                section["visible"] = True
            content = section.get("content")
            if not isinstance(content, dict):
                section["content"] = definition.new_content()
            else:
                section["content"] = self._repair_content(
                    content, definition.content_schema, definition.default_content
                )
            order = section.get("order")
            sort_key = order if isinstance(order, (int, float)) and not isinstance(order, bool) else index
            candidates.append((sort_key, index, section))

        candidates.sort(key=lambda item: (item[0], item[1]))
        repaired = [section for _, _, section in candidates]
        for position, section in enumerate(repaired):
            section["order"] = position
        return repaired

    def _repair_content(
        self,
        content: Mapping[str, Any],
        schema: Mapping[str, FieldRule],
        defaults: Mapping[str, Any],
    ) -> dict[str, Any]:
        repaired = dict(content)
        for name, rule in schema.items():
            value = repaired.get(name)
            if not field_errors(name, rule, value):
                continue
            fixed = self._repair_value(rule, value, defaults.get(name))
            if fixed is None and name in repaired and not rule.required:
                repaired[name] = None
            elif fixed is not None:
                repaired[name] = fixed
        return repaired

    def _repair_value(self, rule: FieldRule, value: Any, default: Any) -> Any:
        fallback = copy.deepcopy(default) if default is not None and not field_errors("_", rule, default) else None
        if value is None or value == "":
            return fallback if rule.required else None

        if rule.kind in ("string", "text") and isinstance(value, str) and rule.max_length:
            return value[: rule.max_length]
        if rule.kind == "object" and isinstance(value, dict):
            return self._repair_content(value, rule.properties or {}, default if isinstance(default, dict) else {})
        if rule.kind == "array" and isinstance(value, list):
            return self._repair_array(rule, value, default if isinstance(default, list) else [])
        return fallback if rule.required or fallback is not None else None

    def _repair_array(self, rule: FieldRule, items: list[Any], default: list[Any]) -> list[Any] | None:
        if rule.item_schema is not None:
            template = default[0] if default and isinstance(default[0], dict) else {}
            kept = []
            for item in items:
                if not isinstance(item, dict):
                    continue
                fixed = self._repair_content(item, rule.item_schema, template)
                if not any(
                    field_errors(name, item_rule, fixed.get(name))
                    for name, item_rule in rule.item_schema.items()
                ):
                    kept.append(fixed)
        elif rule.item_kind is not None:
            item_rule = FieldRule(kind=rule.item_kind, required=True)
            kept = [item for item in items if not field_errors("_", item_rule, item)]
        else:
            kept = list(items)

        if rule.max_items is not None:
            kept = kept[: rule.max_items]
        if rule.min_items and len(kept) < rule.min_items:
            for item in default:
                if len(kept) >= rule.min_items:
                    break
                kept.append(copy.deepcopy(item))
        if rule.min_items and len(kept) < rule.min_items:
            return None
        return kept


def sanitize(document: Any, registry: SchemaRegistry = DEFAULT_REGISTRY) -> dict[str, Any]:
    return DocumentSanitizer(registry).sanitize(document)


__all__ = ["DocumentSanitizer", "sanitize"]
