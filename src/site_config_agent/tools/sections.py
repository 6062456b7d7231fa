"""Section-level tools: add, update, remove and reorder."""
from __future__ import annotations

import copy
from typing import Any

from ..document import (
    SiteDocument,
    new_section,
    page_label,
    renumber,
    section_scopes,
)
from ..errors import ToolRejectedError
from ..models.tools import (
    AddSectionInput,
    RemoveSectionInput,
    ReorderSectionsInput,
    ToolOutcome,
    UpdateSectionInput,
)
from ..validator import field_errors
from .context import ToolContext, require_page, section_not_found, target_sections
from .merge import changed_fields, deep_merge, format_changes

SectionLocation = tuple[str, list[dict[str, Any]], int]


def _scopes(document: SiteDocument, page_id: str | None) -> list[tuple[str, list[dict[str, Any]]]]:
    if page_id:
        page = require_page(document, page_id)
        return [(page_label(page), page.setdefault("sections", []))]
    return section_scopes(document)


def resolve_section(
    context: ToolContext,
    document: SiteDocument,
    *,
    section_id: str | None,
    section_type: str | None,
    content_keys: list[str] | tuple[str, ...] = (),
    page_id: str | None = None,
) -> SectionLocation | None:
    """Find the section a request refers to.

    Tried in order: exact id, then the first section of ``section_type``,
    then the first section whose schema shares a key with ``content_keys``.
    The last step walks section types in registry order and stops at the
    first hit, so requests touching common fields such as ``title`` land on
    the earliest matching type.
    """
    scopes = _scopes(document, page_id)

    if section_id:
        for label, sections in scopes:
            for index, section in enumerate(sections):
                if section.get("id") == section_id:
                    return label, sections, index

    if section_type:
        for label, sections in scopes:
            for index, section in enumerate(sections):
                if section.get("type") == section_type:
                    return label, sections, index

    if content_keys:
        wanted = set(content_keys)
        for candidate_type in context.registry.list_types():
            if not wanted & set(context.registry.schema_keys(candidate_type)):
                continue
            for label, sections in scopes:
                for index, section in enumerate(sections):
                    if section.get("type") == candidate_type:
                        return label, sections, index
    return None


def _schema_warnings(context: ToolContext, section: dict[str, Any], keys: list[str]) -> list[str]:
    definition = context.registry.get_definition(section.get("type"))
    if definition is None:
        return []
    content = section.get("content") or {}
    warnings: list[str] = []
    for key in keys:
        rule = definition.content_schema.get(key)
        if rule is not None:
            warnings.extend(field_errors(key, rule, content.get(key)))
    return warnings


def _with_warnings(message: str, warnings: list[str]) -> str:
    if not warnings:
        return message
    return f"{message}\nSchema warnings (values will be repaired if left invalid): " + "; ".join(warnings)


def add_section(context: ToolContext, document: SiteDocument, payload: AddSectionInput) -> ToolOutcome:
    definition = context.registry.get_definition(payload.type)
    if definition is None:
        raise ToolRejectedError(
            f"Unknown section type: {payload.type}. Available types: {', '.join(context.registry.list_types())}"
        )
    label, sections = target_sections(document, payload.page_id)
    section = new_section(context.registry, payload.type, payload.content)
    position = len(sections) if payload.position is None else min(payload.position, len(sections))
    sections.insert(position, section)
    renumber(sections)
    message = f"Added {definition.display_name} section ({section['id']}) at position {position} on {label}"
    warnings = _schema_warnings(context, section, list((payload.content or {}).keys()))
    return ToolOutcome(success=True, message=_with_warnings(message, warnings), document=document, changed=True)


def update_section(context: ToolContext, document: SiteDocument, payload: UpdateSectionInput) -> ToolOutcome:
    location = resolve_section(
        context,
        document,
        section_id=payload.section_id,
        section_type=payload.section_type,
        content_keys=list(payload.content),
        page_id=payload.page_id,
    )
    if location is None:
        raise section_not_found(document, payload.section_id or payload.section_type or "no matching section")
    _, sections, index = location
    section = sections[index]

    before = section.get("content") if isinstance(section.get("content"), dict) else {}
    after = deep_merge(before, payload.content)
    changes = changed_fields(before, after)
    section["content"] = after
    if payload.visible is not None and section.get("visible") != payload.visible:
        changes["visible"] = (section.get("visible"), payload.visible)
        section["visible"] = payload.visible

    reference = f"{section.get('type')} section ({section.get('id')})"
    if not changes:
        return ToolOutcome(
            success=True,
            message=f"No changes to {reference}; the requested values match the current content.",
            document=document,
            previous_content={},
            changed=False,
        )

    message = f"Updated {reference}. Previous values:\n{format_changes(changes)}"
    warnings = _schema_warnings(context, section, [key for key in changes if key != "visible"])
    return ToolOutcome(
        success=True,
        message=_with_warnings(message, warnings),
        document=document,
        previous_content={key: copy.deepcopy(old) for key, (old, _) in changes.items()},
        changed=True,
    )


def remove_section(context: ToolContext, document: SiteDocument, payload: RemoveSectionInput) -> ToolOutcome:
    location = resolve_section(
        context,
        document,
        section_id=payload.section_id,
        section_type=payload.section_type,
        page_id=payload.page_id,
    )
    if location is None:
        raise section_not_found(document, payload.section_id or payload.section_type or "")
    label, sections, index = location
    removed = sections.pop(index)
    renumber(sections)
    return ToolOutcome(
        success=True,
        message=f"Removed {removed.get('type')} section ({removed.get('id')}) from {label}",
        document=document,
        previous_content=copy.deepcopy(removed),
        changed=True,
    )


def _reorder_scope(document: SiteDocument, payload: ReorderSectionsInput) -> tuple[str, list[dict[str, Any]]]:
    """The page holding the first id in ``newOrder`` that exists, unless a page was named."""
    if payload.page_id:
        return target_sections(document, payload.page_id)
    scopes = section_scopes(document)
    for section_id in payload.new_order or []:
        for label, sections in scopes:
            if any(section.get("id") == section_id for section in sections):
                return label, sections
    return target_sections(document, None)


def reorder_sections(context: ToolContext, document: SiteDocument, payload: ReorderSectionsInput) -> ToolOutcome:
    if payload.new_order is not None:
        label, sections = _reorder_scope(document, payload)
        by_id = {section.get("id"): section for section in sections}
        listed = [section_id for section_id in dict.fromkeys(payload.new_order) if section_id in by_id]
        if not listed:
            raise section_not_found(document, ", ".join(payload.new_order) or "empty newOrder")
        reordered = [by_id[section_id] for section_id in listed]
        placed = set(listed)
        reordered += [section for section in sections if section.get("id") not in placed]
        sections[:] = reordered
    else:
        move = payload.move_section
        location = resolve_section(
            context, document, section_id=move.section_id, section_type=None, page_id=payload.page_id
        )
        if location is None:
            raise section_not_found(document, move.section_id)
        label, sections, index = location
        section = sections.pop(index)
        targets = {
            "up": max(0, index - 1),
            "down": min(len(sections), index + 1),
            "first": 0,
            "last": len(sections),
        }
        sections.insert(targets[move.direction], section)
    renumber(sections)
    order = ", ".join(str(section.get("id")) for section in sections)
    return ToolOutcome(
        success=True,
        message=f"Sections reordered on {label}: {order}",
        document=document,
        changed=True,
    )


__all__ = [
    "add_section",
    "remove_section",
    "reorder_sections",
    "resolve_section",
    "update_section",
]
