from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..schema_registry import HEX_COLOR_PATTERN


class ToolInput(BaseModel):
    """Base for tool payloads; keys arrive camelCased from the model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def _check_hex(value: str | None) -> str | None:
    if value is None:
        return value
    if not HEX_COLOR_PATTERN.match(value):
        raise ValueError(f"{value!r} is not a hex color such as #3B82F6")
    return value


class UpdateThemeInput(ToolInput):
    primary_color: str | None = None
    secondary_color: str | None = None
    background_color: str | None = None
    text_color: str | None = None
    font_family: str | None = None
    preset: str | None = Field(default=None, validation_alias=AliasChoices("preset", "presetKey"))
    colors: dict[str, str] | None = None

    @field_validator("primary_color", "secondary_color", "background_color", "text_color")
    @classmethod
    def _check_color(cls, value: str | None) -> str | None:
        return _check_hex(value)

    @field_validator("colors")
    @classmethod
    def _check_colors(cls, value: dict[str, str] | None) -> dict[str, str] | None:
        for color in (value or {}).values():
            _check_hex(color)
        return value


class AddSectionInput(ToolInput):
    type: str
    position: int | None = Field(default=None, ge=0)
    content: dict[str, Any] | None = None
    page_id: str | None = None


class UpdateSectionInput(ToolInput):
    section_id: str | None = None
    section_type: str | None = None
    content: dict[str, Any] = Field(default_factory=dict)
    visible: bool | None = None
    page_id: str | None = None

    @model_validator(mode="after")
    def _require_change(self) -> "UpdateSectionInput":
        if not self.content and self.visible is None:
            raise ValueError("provide content fields to change or a visible flag")
        return self


class RemoveSectionInput(ToolInput):
    section_id: str | None = None
    section_type: str | None = None
    page_id: str | None = None

    @model_validator(mode="after")
    def _require_reference(self) -> "RemoveSectionInput":
        if not self.section_id and not self.section_type:
            raise ValueError("provide sectionId or sectionType")
        return self


class MoveSection(ToolInput):
    section_id: str
    direction: Literal["up", "down", "first", "last"]


class ReorderSectionsInput(ToolInput):
    new_order: list[str] | None = None
    move_section: MoveSection | None = None
    page_id: str | None = None

    @model_validator(mode="after")
    def _require_order(self) -> "ReorderSectionsInput":
        if self.new_order is None and self.move_section is None:
            raise ValueError("provide newOrder or moveSection")
        return self


class SectionSeed(ToolInput):
    type: str
    content: dict[str, Any] | None = None


class CreateFullSiteInput(ToolInput):
    site_name: str | None = None
    theme: dict[str, str] | None = None
    sections: list[SectionSeed] = Field(default_factory=list)

    @field_validator("theme")
    @classmethod
    def _check_theme(cls, value: dict[str, str] | None) -> dict[str, str] | None:
        for key, color in (value or {}).items():
            if key != "fontFamily":
                _check_hex(color)
        return value


class AddPageInput(ToolInput):
    template_id: str
    name: str | None = None
    slug: str | None = None


class RemovePageInput(ToolInput):
    page_id: str


class UpdatePageInput(ToolInput):
    page_id: str
    name: str | None = Field(default=None, min_length=1, max_length=60)
    slug: str | None = None


class ListPagesInput(ToolInput):
    pass


class NavigationLinkInput(ToolInput):
    page_id: str
    label: str = Field(min_length=1, max_length=50)


class UpdateNavigationInput(ToolInput):
    links: list[NavigationLinkInput]
    style: str | None = None


class ToolOutcome(BaseModel):
    """What a tool hands back: the (possibly unchanged) document plus feedback for the model."""

    success: bool
    message: str
    document: dict[str, Any] | None = None
    previous_content: dict[str, Any] | None = None
    changed: bool = False

    @classmethod
    def failure(cls, message: str, document: dict[str, Any] | None) -> "ToolOutcome":
        return cls(success=False, message=message, document=document, changed=False)


__all__ = [
    "AddPageInput",
    "AddSectionInput",
    "CreateFullSiteInput",
    "ListPagesInput",
    "MoveSection",
    "NavigationLinkInput",
    "RemovePageInput",
    "RemoveSectionInput",
    "ReorderSectionsInput",
    "SectionSeed",
    "ToolInput",
    "ToolOutcome",
    "UpdateNavigationInput",
    "UpdatePageInput",
    "UpdateSectionInput",
    "UpdateThemeInput",
]
