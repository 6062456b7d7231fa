import pytest

from site_config_agent.errors import UnknownSectionTypeError
from site_config_agent.schema_registry import (
    AVAILABLE_ICONS,
    DEFAULT_REGISTRY,
    FieldRule,
    SchemaRegistry,
)
from site_config_agent.validator import content_errors


def test_every_default_content_satisfies_its_schema():
    for section_type in DEFAULT_REGISTRY.list_types():
        definition = DEFAULT_REGISTRY.require_definition(section_type)
        assert content_errors(definition.default_content, definition.content_schema) == [], section_type


def test_lookup_contract():
    assert DEFAULT_REGISTRY.get_definition("hero").display_name == "Hero Banner"
    assert DEFAULT_REGISTRY.get_definition("carousel") is None
    assert DEFAULT_REGISTRY.get_definition(None) is None
    with pytest.raises(UnknownSectionTypeError) as excinfo:
        DEFAULT_REGISTRY.require_definition("carousel")
    assert excinfo.value.section_type == "carousel"
    assert isinstance(excinfo.value, LookupError)


def test_listings_cover_core_and_template_types():
    types = DEFAULT_REGISTRY.list_types()
    for expected in ("hero", "features", "about", "testimonials", "pricing", "contact", "footer"):
        assert expected in types
    for expected in ("story", "services", "team", "gallery", "contactForm"):
        assert expected in types
    assert DEFAULT_REGISTRY.list_icons() == list(AVAILABLE_ICONS)
    assert len(DEFAULT_REGISTRY.list_icons()) == 18
    assert set(DEFAULT_REGISTRY.list_theme_presets()) == {"blue", "purple", "green", "dark", "sunset"}


def test_new_content_is_an_independent_copy():
    first = DEFAULT_REGISTRY.default_content("features")
    first["items"].append({"icon": "star", "title": "Extra", "description": "x"})
    second = DEFAULT_REGISTRY.default_content("features")
    assert len(second["items"]) == 3


def test_new_content_overrides_top_level_only():
    definition = DEFAULT_REGISTRY.require_definition("hero")
    content = definition.new_content({"headline": "Hello"})
    assert content["headline"] == "Hello"
    assert content["ctaText"] == "Get Started"


def test_default_theme_uses_blue_preset_without_display_name():
    theme = DEFAULT_REGISTRY.default_theme()
    assert theme["primaryColor"] == "#3B82F6"
    assert theme["fontFamily"] == "Inter"
    assert "name" not in theme


def test_listings_cannot_mutate_registry():
    presets = DEFAULT_REGISTRY.list_theme_presets()
    presets["blue"]["primaryColor"] = "#000000"
    assert DEFAULT_REGISTRY.theme_preset("blue")["primaryColor"] == "#3B82F6"


def test_tool_documentation_mentions_types_presets_and_icons():
    text = DEFAULT_REGISTRY.tool_documentation()
    assert "- hero:" in text
    assert "headline*" in text
    assert "purple: Royal Purple" in text
    assert "rocket" in text


def test_registry_rejects_unknown_default_preset():
    with pytest.raises(ValueError):
        SchemaRegistry(default_preset="neon")


def test_field_rule_rejects_unknown_kind():
    with pytest.raises(ValueError):
        FieldRule(kind="date")
