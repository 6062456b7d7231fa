"""Whole-site tools: theme changes and create-or-merge of a full site."""
from __future__ import annotations

import copy
import logging
from typing import Any

from ..document import SiteDocument, copyright_line, is_empty, new_section, renumber
from ..errors import ToolRejectedError
from ..models.tools import CreateFullSiteInput, SectionSeed, ToolOutcome, UpdateThemeInput
from ..schema_registry import DEFAULT_SITE_NAME, THEME_COLOR_FIELDS
from .context import ToolContext, target_sections
from .merge import changed_fields, deep_merge

logger = logging.getLogger(__name__)

_THEME_FIELDS = {
    "primary_color": "primaryColor",
    "secondary_color": "secondaryColor",
    "background_color": "backgroundColor",
    "text_color": "textColor",
    "font_family": "fontFamily",
}


def update_theme(context: ToolContext, document: SiteDocument, payload: UpdateThemeInput) -> ToolOutcome:
    theme = document.get("theme")
    if not isinstance(theme, dict):
        theme = context.registry.default_theme()
    before = dict(theme)
    applied: list[str] = []

    if payload.preset:
        preset = context.registry.theme_preset(payload.preset)
        if preset is None:
            raise ToolRejectedError(
                f"Unknown theme preset: {payload.preset}. "
                f"Available presets: {', '.join(context.registry.list_theme_presets())}"
            )
        applied.append(f"preset {payload.preset} ({preset.pop('name', payload.preset)})")
        theme.update(preset)

    unknown = [key for key in (payload.colors or {}) if key not in THEME_COLOR_FIELDS]
    if unknown:
        raise ToolRejectedError(
            f"Unknown theme colors: {', '.join(unknown)}. Known colors: {', '.join(THEME_COLOR_FIELDS)}"
        )
    theme.update(payload.colors or {})
    for attribute, key in _THEME_FIELDS.items():
        value = getattr(payload, attribute)
        if value:
            theme[key] = value

    document["theme"] = theme
    changes = changed_fields(before, theme)
    if not changes:
        return ToolOutcome(success=True, message="Theme already matches the request", document=document)
    summary = ", ".join(f"{key}={new}" for key, (_, new) in changes.items())
    if applied:
        summary = f"{applied[0]}; {summary}"
    return ToolOutcome(
        success=True,
        message=f"Theme updated: {summary}",
        document=document,
        previous_content={key: old for key, (old, _) in changes.items()},
        changed=True,
    )


def _seed_content(seed: SectionSeed, site_name: str) -> dict[str, Any]:
    content = dict(seed.content or {})
    if seed.type == "footer":
        content.setdefault("companyName", site_name)
        content.setdefault("copyright", copyright_line(site_name))
    return content


def _apply_site_fields(
    context: ToolContext, document: SiteDocument, payload: CreateFullSiteInput
) -> dict[str, Any]:
    previous: dict[str, Any] = {}
    if payload.site_name and payload.site_name != document.get("siteName"):
        previous["siteName"] = document.get("siteName")
        document["siteName"] = payload.site_name
    elif not document.get("siteName"):
        document["siteName"] = DEFAULT_SITE_NAME
    theme = document.get("theme")
    if not isinstance(theme, dict):
        theme = context.registry.default_theme()
    if payload.theme:
        previous["theme"] = copy.deepcopy(document.get("theme"))
        theme = {**theme, **payload.theme}
    document["theme"] = theme
    return previous


def _skipped_note(skipped: list[str]) -> str:
    return f"; skipped unknown section types: {', '.join(skipped)}" if skipped else ""


def create_full_site(context: ToolContext, document: SiteDocument, payload: CreateFullSiteInput) -> ToolOutcome:
    """Populate an empty site, or merge into an existing one without dropping sections.

    On a document with content, a seed whose type already exists is deep-merged
    into the first section of that type not yet merged by this call. Seeds of
    new types are appended. Existing sections are never removed.
    """
    empty = is_empty(document)
    previous = _apply_site_fields(context, document, payload)
    site_name = document["siteName"]
    label, sections = target_sections(document, None)
    skipped = [seed.type for seed in payload.sections if not context.registry.has_type(seed.type)]
    seeds = [seed for seed in payload.sections if context.registry.has_type(seed.type)]
    if skipped:
        logger.warning("create_full_site skipped unknown section types", extra={"section_types": skipped})

    if empty:
        sections[:] = [new_section(context.registry, seed.type, _seed_content(seed, site_name)) for seed in seeds]
        renumber(sections)
        footer = document.get("footer")
        if isinstance(footer, dict) and "siteName" in previous:
            footer["companyName"] = site_name
            footer["copyright"] = copyright_line(site_name)
        return ToolOutcome(
            success=True,
            message=f'Created website "{site_name}" with {len(sections)} sections on {label}{_skipped_note(skipped)}',
            document=document,
            previous_content=previous or None,
            changed=True,
        )

    kept = len(sections)
    merged_ids: set[str] = set()
    merged: list[str] = []
    added: list[str] = []
    previous_sections: dict[str, Any] = {}
    for seed in seeds:
        existing = next(
            (
                section
                for section in sections
                if section.get("type") == seed.type and section.get("id") not in merged_ids
            ),
            None,
        )
        if existing is None:
            section = new_section(context.registry, seed.type, _seed_content(seed, site_name))
            sections.append(section)
            added.append(f"{seed.type} ({section['id']})")
            continue
        merged_ids.add(existing.get("id"))
        before = existing.get("content") if isinstance(existing.get("content"), dict) else {}
        after = deep_merge(before, seed.content or {})
        if changed_fields(before, after):
            previous_sections[existing.get("id")] = copy.deepcopy(before)
        existing["content"] = after
        merged.append(f"{seed.type} ({existing.get('id')})")
    renumber(sections)

    if previous_sections:
        previous["sections"] = previous_sections
    parts = []
    if merged:
        parts.append(f"merged into {', '.join(merged)}")
    if added:
        parts.append(f"added {', '.join(added)}")
    detail = "; ".join(parts) or "no section changes"
    return ToolOutcome(
        success=True,
        message=(
            f'Updated existing website "{site_name}" on {label}: {detail}. '
            f"All {kept} existing sections were kept{_skipped_note(skipped)}"
        ),
        document=document,
        previous_content=previous or None,
        changed=True,
    )


__all__ = ["create_full_site", "update_theme"]
