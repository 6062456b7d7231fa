from __future__ import annotations

from ..llm.base import ToolDefinition
from ..schema_registry import THEME_COLOR_FIELDS, SchemaRegistry

_COLOR_EXAMPLES = {
    "primaryColor": ("Primary brand color", "#3B82F6"),
    "secondaryColor": ("Secondary accent color", "#10B981"),
    "backgroundColor": ("Background color", "#FFFFFF"),
    "textColor": ("Main text color", "#1F2937"),
}

_PAGE_ID = {"type": "string", "description": "Target page id; omit for the home page"}


def _color_properties() -> dict[str, dict[str, str]]:
    return {
        name: {
            "type": "string",
            "description": f'{_COLOR_EXAMPLES[name][0]} in hex format (e.g., "{_COLOR_EXAMPLES[name][1]}")',
        }
        for name in THEME_COLOR_FIELDS
    }


def build_tool_definitions(registry: SchemaRegistry, template_ids: list[str]) -> list[ToolDefinition]:
    """Tool catalog advertised to the model, with enums filled from the registry."""
    section_types = registry.list_types()
    presets = registry.list_theme_presets()
    type_summary = ", ".join(section_types)

    return [
        ToolDefinition(
            name="update_theme",
            description=(
                "Update the website theme colors and font. Use this when the user wants to change "
                "colors, fonts, or apply a theme preset. A preset is applied first and explicit "
                "colors are layered on top."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    **_color_properties(),
                    "fontFamily": {
                        "type": "string",
                        "description": 'Font family name (e.g., "Inter", "Roboto", "Poppins")',
                    },
                    "preset": {
                        "type": "string",
                        "enum": list(presets),
                        "description": "Apply a preset theme: "
                        + ", ".join(f"{key} ({preset.get('name', key)})" for key, preset in presets.items()),
                    },
                },
            },
        ),
        ToolDefinition(
            name="add_section",
            description=f"Add a new section to a page. Available section types: {type_summary}.",
            input_schema={
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": section_types, "description": "Type of section to add"},
                    "position": {
                        "type": "integer",
                        "description": "Position to insert the section (0 = first, omit for end)",
                    },
                    "content": {
                        "type": "object",
                        "description": "Section content. Structure depends on section type.",
                    },
                    "pageId": _PAGE_ID,
                },
                "required": ["type"],
            },
        ),
        ToolDefinition(
            name="update_section",
            description=(
                "Update an existing section's content or visibility. Use this to change headlines, "
                "text, features, pricing, etc. Only include the fields that change; nested objects "
                "are merged and arrays are replaced."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "sectionId": {
                        "type": "string",
                        "description": 'ID of the section to update (e.g., "hero-1a2b3c4d")',
                    },
                    "sectionType": {
                        "type": "string",
                        "enum": section_types,
                        "description": "Type of section (used when sectionId is unknown)",
                    },
                    "content": {
                        "type": "object",
                        "description": "Partial content update - only include fields to change",
                    },
                    "visible": {"type": "boolean", "description": "Set to false to hide the section, true to show"},
                    "pageId": _PAGE_ID,
                },
                "required": ["content"],
            },
        ),
        ToolDefinition(
            name="remove_section",
            description="Remove a section from a page.",
            input_schema={
                "type": "object",
                "properties": {
                    "sectionId": {"type": "string", "description": "ID of the section to remove"},
                    "sectionType": {
                        "type": "string",
                        "enum": section_types,
                        "description": "Type of section to remove (if sectionId not known)",
                    },
                    "pageId": _PAGE_ID,
                },
            },
        ),
        ToolDefinition(
            name="reorder_sections",
            description="Change the order of sections on a page.",
            input_schema={
                "type": "object",
                "properties": {
                    "newOrder": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Array of section IDs in the desired order",
                    },
                    "moveSection": {
                        "type": "object",
                        "properties": {
                            "sectionId": {"type": "string"},
                            "direction": {"type": "string", "enum": ["up", "down", "first", "last"]},
                        },
                        "required": ["sectionId", "direction"],
                        "description": "Alternative: move a single section up/down/first/last",
                    },
                    "pageId": _PAGE_ID,
                },
            },
        ),
        ToolDefinition(
            name="create_full_site",
            description=(
                "Create a complete website with multiple sections. Use this for initial site "
                "creation when the user describes a new website. On a site that already has "
                "content, existing sections are kept: sections of an existing type are merged "
                "into it and new types are appended."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "siteName": {"type": "string", "description": "Name of the website"},
                    "theme": {
                        "type": "object",
                        "properties": {
                            **{name: {"type": "string"} for name in THEME_COLOR_FIELDS},
                            "fontFamily": {"type": "string"},
                        },
                        "description": "Theme configuration",
                    },
                    "sections": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "type": {"type": "string", "enum": section_types},
                                "content": {"type": "object"},
                            },
                            "required": ["type"],
                        },
                        "description": "Array of sections to create",
                    },
                },
                "required": ["siteName", "sections"],
            },
        ),
        ToolDefinition(
            name="add_page",
            description="Add a new page built from a template. The slug is made unique automatically.",
            input_schema={
                "type": "object",
                "properties": {
                    "templateId": {"type": "string", "enum": template_ids, "description": "Page template to use"},
                    "name": {"type": "string", "description": "Page name shown in navigation"},
                    "slug": {"type": "string", "description": "URL slug (e.g., \"about\")"},
                },
                "required": ["templateId"],
            },
        ),
        ToolDefinition(
            name="remove_page",
            description="Remove a page and its navigation links. The home page cannot be removed.",
            input_schema={
                "type": "object",
                "properties": {"pageId": {"type": "string", "description": "ID of the page to remove"}},
                "required": ["pageId"],
            },
        ),
        ToolDefinition(
            name="update_page",
            description="Rename a page or change its slug. The home page slug cannot change.",
            input_schema={
                "type": "object",
                "properties": {
                    "pageId": {"type": "string", "description": "ID of the page to update"},
                    "name": {"type": "string", "description": "New page name"},
                    "slug": {"type": "string", "description": "New URL slug"},
                },
                "required": ["pageId"],
            },
        ),
        ToolDefinition(
            name="list_pages",
            description="List the pages of the site with their ids, slugs and sections.",
            input_schema={"type": "object", "properties": {}},
        ),
        ToolDefinition(
            name="update_navigation",
            description="Replace the navigation links and optionally the navigation style.",
            input_schema={
                "type": "object",
                "properties": {
                    "links": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {"pageId": {"type": "string"}, "label": {"type": "string"}},
                            "required": ["pageId", "label"],
                        },
                        "description": "Navigation links in display order",
                    },
                    "style": {"type": "string", "enum": registry.list_navigation_styles()},
                },
                "required": ["links"],
            },
        ),
    ]


__all__ = ["build_tool_definitions"]
