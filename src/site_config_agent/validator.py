from __future__ import annotations

from typing import Any, Mapping

from pydantic import AnyUrl, EmailStr, TypeAdapter, ValidationError

from .models.validation import ValidationReport
from .schema_registry import (
    DEFAULT_REGISTRY,
    HEX_COLOR_PATTERN,
    THEME_COLOR_FIELDS,
    FieldRule,
    SchemaRegistry,
)

SITE_NAME_MAX_LENGTH = 100

_EMAIL = TypeAdapter(EmailStr)
_URL = TypeAdapter(AnyUrl)


def is_hex_color(value: Any) -> bool:
    return isinstance(value, str) and HEX_COLOR_PATTERN.match(value) is not None


def is_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        _EMAIL.validate_python(value)
    except ValidationError:
        return False
    return True


def is_url(value: Any) -> bool:
    """Absolute URLs plus site-relative paths and in-page anchors."""
    if not isinstance(value, str):
        return False
    if value.startswith(("/", "#")):
        return True
    try:
        _URL.validate_python(value)
    except ValidationError:
        return False
    return True


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def field_errors(name: str, rule: FieldRule, value: Any) -> list[str]:
    """Errors for one content field; an empty list means the value is acceptable."""
    if rule.required and _is_blank(value):
        return [f"{name} is required"]
    if value is None:
        return []

    kind = rule.kind
    if kind in ("string", "text"):
        if not isinstance(value, str):
            return [f"{name} must be a string"]
        if rule.max_length and len(value) > rule.max_length:
            return [f"{name} must be {rule.max_length} characters or less"]
        return []
    if kind == "email":
        return [] if is_email(value) else [f"{name} must be a valid email"]
    if kind == "url":
        if value == "":
            return []
        return [] if is_url(value) else [f"{name} must be a valid URL"]
    if kind == "hexColor":
        return [] if is_hex_color(value) else [f"{name} must be a hex color like #1a1a1a"]
    if kind == "enum":
        if value not in rule.allowed_values:
            return [f"{name} must be one of: {', '.join(rule.allowed_values)}"]
        return []
    if kind == "boolean":
        return [] if isinstance(value, bool) else [f"{name} must be a boolean"]
    if kind == "integer":
        if isinstance(value, bool) or not isinstance(value, int):
            return [f"{name} must be an integer"]
        if rule.minimum is not None and value < rule.minimum:
            return [f"{name} must be at least {rule.minimum}"]
        if rule.maximum is not None and value > rule.maximum:
            return [f"{name} must be at most {rule.maximum}"]
        return []
    if kind == "object":
        if not isinstance(value, dict):
            return [f"{name} must be an object"]
        return [f"{name}.{error}" for error in content_errors(value, rule.properties or {})]
    if kind == "array":
        return _array_errors(name, rule, value)
    return []


def _array_errors(name: str, rule: FieldRule, value: Any) -> list[str]:
    if not isinstance(value, list):
        return [f"{name} must be an array"]
    errors: list[str] = []
    if rule.min_items and len(value) < rule.min_items:
        errors.append(f"{name} must have at least {rule.min_items} items")
    if rule.max_items is not None and len(value) > rule.max_items:
        errors.append(f"{name} must have at most {rule.max_items} items")
    for index, item in enumerate(value):
        item_name = f"{name}[{index}]"
        if rule.item_schema is not None:
            if not isinstance(item, dict):
                errors.append(f"{item_name} must be an object")
                continue
            errors.extend(f"{item_name}: {error}" for error in content_errors(item, rule.item_schema))
        elif rule.item_kind is not None:
            errors.extend(field_errors(item_name, FieldRule(kind=rule.item_kind, required=True), item))
    return errors


def content_errors(content: Mapping[str, Any], schema: Mapping[str, FieldRule]) -> list[str]:
    """Check ``content`` against ``schema``; keys the schema does not know are ignored."""
    errors: list[str] = []
    for name, rule in schema.items():
        errors.extend(field_errors(name, rule, content.get(name)))
    return errors


def section_errors(section: Any, registry: SchemaRegistry = DEFAULT_REGISTRY) -> list[str]:
    if not isinstance(section, dict):
        return ["section must be an object"]
    errors: list[str] = []
    if not isinstance(section.get("id"), str) or not section.get("id"):
        errors.append("id is required")
    definition = registry.get_definition(section.get("type"))
    if definition is None:
        errors.append(f"Invalid section type: {section.get('type')}")
        return errors
    order = section.get("order")
    if isinstance(order, bool) or not isinstance(order, int):
        errors.append("order must be an integer")
    if not isinstance(section.get("visible"), bool):
        errors.append("visible must be a boolean")
    content = section.get("content")
    if not isinstance(content, dict):
        errors.append("content must be an object")
    else:
        errors.extend(content_errors(content, definition.content_schema))
    return errors


def _sections_errors(prefix: str, sections: Any, registry: SchemaRegistry) -> list[str]:
    if not isinstance(sections, list):
        return [f"{prefix} must be an array"]
    errors: list[str] = []
    seen_ids: set[str] = set()
    for index, section in enumerate(sections):
        label = section.get("id") if isinstance(section, dict) else None
        location = f"{prefix}[{index}] ({label or 'unknown'})"
        problems = section_errors(section, registry)
        if isinstance(label, str) and label:
            if label in seen_ids:
                problems.append(f"duplicate section id {label}")
            seen_ids.add(label)
        if isinstance(section, dict) and section.get("order") != index and "order must be an integer" not in problems:
            problems.append(f"order is {section.get('order')} but the section is at position {index}")
        errors.extend(f"{location}: {problem}" for problem in problems)
    return errors


def _theme_errors(theme: Any) -> list[str]:
    if not isinstance(theme, dict):
        return ["theme is required and must be an object"]
    errors = [
        f"theme.{name} must be a hex color"
        for name in THEME_COLOR_FIELDS
        if theme.get(name) is not None and not is_hex_color(theme.get(name))
    ]
    font = theme.get("fontFamily")
    if font is not None and (not isinstance(font, str) or not font):
        errors.append("theme.fontFamily must be a non-empty string")
    return errors


def _pages_errors(document: Mapping[str, Any], registry: SchemaRegistry) -> list[str]:
    pages = document.get("pages")
    if not isinstance(pages, list) or not pages:
        return ["pages must be a non-empty array"]
    errors: list[str] = []
    slugs: set[str] = set()
    page_ids: set[str] = set()
    home_count = 0
    for index, page in enumerate(pages):
        prefix = f"pages[{index}]"
        if not isinstance(page, dict):
            errors.append(f"{prefix} must be an object")
            continue
        page_id = page.get("id")
        if not isinstance(page_id, str) or not page_id:
            errors.append(f"{prefix}: id is required")
        elif page_id in page_ids:
            errors.append(f"{prefix}: duplicate page id {page_id}")
        else:
            page_ids.add(page_id)
        if not isinstance(page.get("name"), str) or not page.get("name"):
            errors.append(f"{prefix}: name is required")
        is_home = page.get("isHome")
        if not isinstance(is_home, bool):
            errors.append(f"{prefix}: isHome must be a boolean")
        elif is_home:
            home_count += 1
        slug = page.get("slug")
        if not isinstance(slug, str):
            errors.append(f"{prefix}: slug must be a string")
        else:
            if slug in slugs:
                errors.append(f"{prefix}: duplicate slug '{slug}'")
            slugs.add(slug)
            if slug == "" and is_home is not True:
                errors.append(f"{prefix}: the empty slug is reserved for the home page")
            if slug != "" and is_home is True:
                errors.append(f"{prefix}: the home page slug must be empty")
        errors.extend(_sections_errors(f"{prefix}.sections", page.get("sections"), registry))
    if home_count != 1:
        errors.append(f"exactly one page must have isHome=true (found {home_count})")
    errors.extend(_navigation_errors(document.get("navigation"), page_ids, registry))
    return errors


def _navigation_errors(navigation: Any, page_ids: set[str], registry: SchemaRegistry) -> list[str]:
    if navigation is None:
        return []
    if not isinstance(navigation, dict):
        return ["navigation must be an object"]
    errors: list[str] = []
    style = navigation.get("style")
    if style is not None and style not in registry.list_navigation_styles():
        errors.append(f"navigation.style must be one of: {', '.join(registry.list_navigation_styles())}")
    links = navigation.get("links", [])
    if not isinstance(links, list):
        return errors + ["navigation.links must be an array"]
    for index, link in enumerate(links):
        prefix = f"navigation.links[{index}]"
        if not isinstance(link, dict):
            errors.append(f"{prefix} must be an object")
            continue
        page_id = link.get("pageId")
        if not isinstance(page_id, str):
            errors.append(f"{prefix}: pageId must be a string")
        elif page_id not in page_ids:
            errors.append(f"{prefix}: pageId {page_id} does not match any page")
        if not isinstance(link.get("label"), str) or not link.get("label"):
            errors.append(f"{prefix}: label is required")
    return errors


def validate(document: Any, registry: SchemaRegistry = DEFAULT_REGISTRY) -> ValidationReport:
    """Report every structural and content problem in ``document`` without changing it."""
    if not isinstance(document, dict):
        return ValidationReport(valid=False, errors=["document must be an object"])

    errors: list[str] = []
    site_name = document.get("siteName")
    if not isinstance(site_name, str) or not site_name:
        errors.append("siteName is required and must be a string")
    elif len(site_name) > SITE_NAME_MAX_LENGTH:
        errors.append(f"siteName must be {SITE_NAME_MAX_LENGTH} characters or less")
    errors.extend(_theme_errors(document.get("theme")))
    footer = document.get("footer")
    if footer is not None and not isinstance(footer, dict):
        errors.append("footer must be an object")

    if "pages" in document:
        errors.extend(_pages_errors(document, registry))
    else:
        errors.extend(_sections_errors("sections", document.get("sections"), registry))

    return ValidationReport(valid=not errors, errors=errors)


__all__ = [
    "content_errors",
    "field_errors",
    "is_email",
    "is_hex_color",
    "is_url",
    "section_errors",
    "validate",
]
