import copy

from site_config_agent.tools.merge import changed_fields, deep_merge, format_changes
from site_config_agent.validator import validate


def _ids(sections):
    return [section["id"] for section in sections]


def _orders(sections):
    return [section["order"] for section in sections]


def test_update_section_by_type_reports_previous_values(executor, legacy_document):
    outcome = executor.execute(
        "update_section", {"sectionType": "hero", "content": {"headline": "New"}}, legacy_document
    )
    assert outcome.success
    hero = outcome.document["sections"][0]
    assert hero["content"]["headline"] == "New"
    assert hero["content"]["subheadline"] == "Fresh roasted coffee, every morning"
    assert 'headline: "Old" → "New"' in outcome.message
    assert outcome.message.startswith("Updated hero section (hero-1). Previous values:")
    assert outcome.previous_content == {"headline": "Old"}


def test_update_section_lists_every_changed_field(executor, legacy_document):
    outcome = executor.execute(
        "update_section",
        {"sectionId": "contact-1", "content": {"title": "Say hi", "phone": None, "email": "hello@beanthere.com"}, "visible": False},
        legacy_document,
    )
    assert 'title: "Visit Us" → "Say hi"' in outcome.message
    assert 'phone: "555-0100" → null' in outcome.message
    assert "visible: true → false" in outcome.message
    assert "email:" not in outcome.message
    assert set(outcome.previous_content) == {"title", "phone", "visible"}


def test_update_section_leaves_input_untouched(executor, legacy_document):
    snapshot = copy.deepcopy(legacy_document)
    executor.execute("update_section", {"sectionId": "hero-1", "content": {"headline": "New"}}, legacy_document)
    assert legacy_document == snapshot


def test_update_section_resolution_prefers_id_over_type(executor, legacy_document):
    outcome = executor.execute(
        "update_section",
        {"sectionId": "about-1", "sectionType": "hero", "content": {"title": "Roasting since 2010"}},
        legacy_document,
    )
    assert outcome.document["sections"][1]["content"]["title"] == "Roasting since 2010"


def test_update_section_falls_back_to_type_when_id_is_stale(executor, legacy_document):
    outcome = executor.execute(
        "update_section",
        {"sectionId": "hero-gone", "sectionType": "contact", "content": {"title": "Find us"}},
        legacy_document,
    )
    assert outcome.success
    assert outcome.document["sections"][2]["content"]["title"] == "Find us"


def test_update_section_key_overlap_picks_first_matching_type(executor, legacy_document):
    # hero has no "title", so the first registered type with one that exists wins: about
    outcome = executor.execute("update_section", {"content": {"title": "Hello"}}, legacy_document)
    assert outcome.success
    assert outcome.document["sections"][1]["content"]["title"] == "Hello"

    outcome = executor.execute("update_section", {"content": {"showForm": False}}, legacy_document)
    assert outcome.document["sections"][2]["content"]["showForm"] is False


def test_update_section_not_found(executor, legacy_document):
    outcome = executor.execute("update_section", {"content": {"nothing": 1}}, legacy_document)
    assert not outcome.success
    assert "Available sections: hero-1 (hero), about-1 (about), contact-1 (contact)" in outcome.message
    assert outcome.document == legacy_document


def test_update_section_without_changes_is_a_noop(executor, legacy_document):
    outcome = executor.execute("update_section", {"sectionId": "hero-1", "content": {"headline": "Old"}}, legacy_document)
    assert outcome.success
    assert not outcome.changed
    assert outcome.message.startswith("No changes")


def test_update_section_requires_content_or_visibility(executor, legacy_document):
    outcome = executor.execute("update_section", {"sectionId": "hero-1"}, legacy_document)
    assert not outcome.success
    assert outcome.message.startswith("Invalid input for update_section")


def test_update_section_warns_about_schema_violations(executor, legacy_document):
    outcome = executor.execute(
        "update_section", {"sectionId": "about-1", "content": {"imagePosition": "center"}}, legacy_document
    )
    assert outcome.success
    assert "Schema warnings" in outcome.message
    assert "imagePosition must be one of: left, right" in outcome.message


def test_update_section_deep_merges_objects_and_replaces_arrays(executor):
    document = {
        "siteName": "Acme",
        "theme": {},
        "sections": [
            {
                "id": "form-1",
                "type": "contactForm",
                "order": 0,
                "visible": True,
                "content": {
                    "title": "Contact",
                    "fields": [{"name": "a", "label": "A", "type": "text"}, {"name": "b", "label": "B", "type": "text"}],
                    "contactInfo": {"email": "a@acme.com", "phone": "1"},
                },
            }
        ],
    }
    outcome = executor.execute(
        "update_section",
        {
            "sectionId": "form-1",
            "content": {
                "contactInfo": {"phone": "2"},
                "fields": [{"name": "c", "label": "C", "type": "email"}],
            },
        },
        document,
    )
    content = outcome.document["sections"][0]["content"]
    assert content["contactInfo"] == {"email": "a@acme.com", "phone": "2"}
    assert content["fields"] == [{"name": "c", "label": "C", "type": "email"}]


def test_add_section_inserts_and_renumbers(executor, legacy_document):
    outcome = executor.execute(
        "add_section", {"type": "pricing", "position": 1, "content": {"title": "Plans"}}, legacy_document
    )
    assert outcome.success
    sections = outcome.document["sections"]
    assert [section["type"] for section in sections] == ["hero", "pricing", "about", "contact"]
    assert _orders(sections) == [0, 1, 2, 3]
    pricing = sections[1]
    assert pricing["content"]["title"] == "Plans"
    assert pricing["content"]["subtitle"] == "Choose the plan that works for you"
    assert pricing["id"].startswith("pricing-")
    assert pricing["id"] in outcome.message


def test_add_section_defaults_to_end_and_clamps_position(executor, legacy_document):
    outcome = executor.execute("add_section", {"type": "testimonials", "position": 99}, legacy_document)
    assert outcome.document["sections"][-1]["type"] == "testimonials"
    assert _orders(outcome.document["sections"]) == [0, 1, 2, 3]


def test_add_section_unknown_type_fails(executor, legacy_document):
    outcome = executor.execute("add_section", {"type": "carousel"}, legacy_document)
    assert not outcome.success
    assert "Unknown section type: carousel" in outcome.message
    assert outcome.document == legacy_document


def test_add_section_defaults_to_home_page(executor, multi_page_document):
    outcome = executor.execute("add_section", {"type": "pricing"}, multi_page_document)
    home = outcome.document["pages"][0]
    assert home["sections"][-1]["type"] == "pricing"
    assert len(outcome.document["pages"][1]["sections"]) == 1


def test_add_section_with_page_id_targets_that_page(executor, multi_page_document):
    outcome = executor.execute("add_section", {"type": "team", "pageId": "page-about"}, multi_page_document)
    about = outcome.document["pages"][1]
    assert [section["type"] for section in about["sections"]] == ["story", "team"]
    assert _orders(about["sections"]) == [0, 1]


def test_add_section_with_page_id_converts_legacy_document(executor, legacy_document):
    outcome = executor.execute("add_section", {"type": "pricing", "pageId": "home"}, legacy_document)
    assert outcome.success
    document = outcome.document
    assert "sections" not in document
    assert _ids(document["pages"][0]["sections"])[:3] == ["hero-1", "about-1", "contact-1"]
    assert validate(document).valid, validate(document).errors


def test_add_section_to_unknown_page_fails(executor, multi_page_document):
    outcome = executor.execute("add_section", {"type": "pricing", "pageId": "nope"}, multi_page_document)
    assert not outcome.success
    assert "Page not found: nope" in outcome.message


def test_remove_middle_section_keeps_order_dense(executor, legacy_document):
    outcome = executor.execute("remove_section", {"sectionId": "about-1"}, legacy_document)
    assert outcome.success
    sections = outcome.document["sections"]
    assert _ids(sections) == ["hero-1", "contact-1"]
    assert _orders(sections) == [0, 1]
    assert outcome.previous_content["id"] == "about-1"


def test_remove_section_by_type_and_not_found(executor, multi_page_document):
    outcome = executor.execute("remove_section", {"sectionType": "story"}, multi_page_document)
    assert outcome.success
    assert outcome.document["pages"][1]["sections"] == []

    outcome = executor.execute("remove_section", {"sectionId": "ghost"}, multi_page_document)
    assert not outcome.success
    assert outcome.document == multi_page_document


def test_remove_section_requires_a_reference(executor, legacy_document):
    outcome = executor.execute("remove_section", {}, legacy_document)
    assert not outcome.success


def test_reorder_with_partial_order_appends_unlisted(executor, legacy_document):
    outcome = executor.execute("reorder_sections", {"newOrder": ["contact-1", "ghost", "hero-1"]}, legacy_document)
    sections = outcome.document["sections"]
    assert _ids(sections) == ["contact-1", "hero-1", "about-1"]
    assert _orders(sections) == [0, 1, 2]


def test_reorder_targets_page_holding_listed_ids(executor, multi_page_document):
    outcome = executor.execute("reorder_sections", {"newOrder": ["footer-home", "hero-home"]}, multi_page_document)
    assert _ids(outcome.document["pages"][0]["sections"]) == ["footer-home", "hero-home", "features-home"]


def test_move_section_directions(executor, legacy_document):
    up = executor.execute("reorder_sections", {"moveSection": {"sectionId": "contact-1", "direction": "up"}}, legacy_document)
    assert _ids(up.document["sections"]) == ["hero-1", "contact-1", "about-1"]

    first = executor.execute("reorder_sections", {"moveSection": {"sectionId": "contact-1", "direction": "first"}}, legacy_document)
    assert _ids(first.document["sections"]) == ["contact-1", "hero-1", "about-1"]

    last = executor.execute("reorder_sections", {"moveSection": {"sectionId": "hero-1", "direction": "last"}}, legacy_document)
    assert _ids(last.document["sections"]) == ["about-1", "contact-1", "hero-1"]
    assert _orders(last.document["sections"]) == [0, 1, 2]

    down_at_end = executor.execute("reorder_sections", {"moveSection": {"sectionId": "contact-1", "direction": "down"}}, legacy_document)
    assert _ids(down_at_end.document["sections"]) == ["hero-1", "about-1", "contact-1"]


def test_move_unknown_section_fails(executor, legacy_document):
    outcome = executor.execute("reorder_sections", {"moveSection": {"sectionId": "ghost", "direction": "up"}}, legacy_document)
    assert not outcome.success


def test_reorder_requires_an_instruction(executor, legacy_document):
    outcome = executor.execute("reorder_sections", {}, legacy_document)
    assert not outcome.success
    assert "newOrder or moveSection" in outcome.message


def test_unknown_tool(executor, legacy_document):
    outcome = executor.execute("delete_everything", {}, legacy_document)
    assert not outcome.success
    assert outcome.message.startswith("Unknown tool: delete_everything")
    assert outcome.document == legacy_document


def test_deep_merge_helpers():
    base = {"a": {"x": 1, "y": 2}, "b": [1, 2], "c": "keep"}
    merged = deep_merge(base, {"a": {"y": 3}, "b": [9]})
    assert merged == {"a": {"x": 1, "y": 3}, "b": [9], "c": "keep"}
    assert base["a"]["y"] == 2
    changes = changed_fields(base, merged)
    assert set(changes) == {"a", "b"}
    assert format_changes({"b": ([1, 2], [9])}) == "b: [1, 2] → [9]"
