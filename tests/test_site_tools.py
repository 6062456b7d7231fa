from site_config_agent.validator import validate


def _seeds():
    return [
        {"type": "hero", "content": {"headline": "Fresh bread daily"}},
        {"type": "services", "content": {"title": "What we bake"}},
        {"type": "contact", "content": {"email": "hi@crumb.example"}},
        {"type": "footer"},
    ]


def test_create_full_site_from_nothing(executor):
    outcome = executor.execute(
        "create_full_site",
        {"siteName": "Crumb Bakery", "theme": {"primaryColor": "#F59E0B"}, "sections": _seeds()},
        None,
    )
    assert outcome.success
    document = outcome.document
    assert document["siteName"] == "Crumb Bakery"
    assert document["theme"]["primaryColor"] == "#F59E0B"
    sections = document["pages"][0]["sections"]
    assert [section["type"] for section in sections] == ["hero", "services", "contact", "footer"]
    assert [section["order"] for section in sections] == [0, 1, 2, 3]
    assert sections[0]["content"]["headline"] == "Fresh bread daily"
    assert sections[3]["content"]["companyName"] == "Crumb Bakery"
    assert document["footer"]["companyName"] == "Crumb Bakery"
    assert outcome.message.startswith('Created website "Crumb Bakery" with 4 sections')
    assert validate(document).valid, validate(document).errors


def test_create_full_site_on_empty_legacy_document(executor):
    document = {"siteName": "Draft", "theme": {"primaryColor": "#3B82F6"}, "sections": []}
    outcome = executor.execute("create_full_site", {"sections": _seeds()}, document)
    assert outcome.document["siteName"] == "Draft"
    assert [section["type"] for section in outcome.document["sections"]] == ["hero", "services", "contact", "footer"]


def test_create_full_site_merges_into_existing_sections(executor, legacy_document):
    outcome = executor.execute(
        "create_full_site",
        {
            "siteName": "Bean There",
            "sections": [
                {"type": "hero", "content": {"headline": "Better coffee"}},
                {"type": "pricing", "content": {"title": "Menu"}},
            ],
        },
        legacy_document,
    )
    assert outcome.success
    sections = outcome.document["sections"]
    assert [section["id"] for section in sections][:3] == ["hero-1", "about-1", "contact-1"]
    assert [section["type"] for section in sections] == ["hero", "about", "contact", "pricing"]
    assert [section["order"] for section in sections] == [0, 1, 2, 3]
    hero = sections[0]["content"]
    assert hero["headline"] == "Better coffee"
    assert hero["subheadline"] == "Fresh roasted coffee, every morning"
    assert sections[2]["content"]["email"] == "hello@beanthere.com"
    assert "All 3 existing sections were kept" in outcome.message
    assert outcome.previous_content["siteName"] == "Bean There Coffee"
    assert outcome.previous_content["sections"]["hero-1"]["headline"] == "Old"


def test_create_full_site_merges_repeated_types_in_order(executor):
    document = {
        "siteName": "Twins",
        "theme": {},
        "sections": [
            {"id": "about-a", "type": "about", "order": 0, "visible": True, "content": {"title": "A", "content": "a"}},
            {"id": "about-b", "type": "about", "order": 1, "visible": True, "content": {"title": "B", "content": "b"}},
        ],
    }
    outcome = executor.execute(
        "create_full_site",
        {"sections": [{"type": "about", "content": {"title": "A2"}}, {"type": "about", "content": {"title": "B2"}}]},
        document,
    )
    titles = [section["content"]["title"] for section in outcome.document["sections"]]
    assert titles == ["A2", "B2"]


def test_create_full_site_skips_unknown_types(executor):
    outcome = executor.execute(
        "create_full_site",
        {"siteName": "Odd", "sections": [{"type": "carousel"}, {"type": "hero"}]},
        None,
    )
    assert outcome.success
    assert [section["type"] for section in outcome.document["pages"][0]["sections"]] == ["hero"]
    assert "skipped unknown section types: carousel" in outcome.message


def test_create_full_site_rejects_bad_theme_colors(executor):
    outcome = executor.execute(
        "create_full_site", {"siteName": "Odd", "theme": {"primaryColor": "blue"}, "sections": []}, None
    )
    assert not outcome.success
    assert outcome.document is None


def test_update_theme_preset_then_overrides(executor, legacy_document):
    outcome = executor.execute(
        "update_theme", {"preset": "purple", "textColor": "#000000", "fontFamily": "Lora"}, legacy_document
    )
    assert outcome.success
    theme = outcome.document["theme"]
    assert theme["primaryColor"] == "#8B5CF6"
    assert theme["textColor"] == "#000000"
    assert theme["fontFamily"] == "Lora"
    assert "name" not in theme
    assert outcome.previous_content["primaryColor"] == "#3B82F6"
    assert outcome.message.startswith("Theme updated: preset purple")


def test_update_theme_accepts_preset_key_alias_and_colors(executor, legacy_document):
    outcome = executor.execute(
        "update_theme", {"presetKey": "green", "colors": {"secondaryColor": "#111111"}}, legacy_document
    )
    assert outcome.success
    assert outcome.document["theme"]["secondaryColor"] == "#111111"


def test_update_theme_rejections(executor, legacy_document):
    unknown = executor.execute("update_theme", {"preset": "neon"}, legacy_document)
    assert not unknown.success
    assert "Available presets" in unknown.message

    bad_color = executor.execute("update_theme", {"primaryColor": "red"}, legacy_document)
    assert not bad_color.success
    assert bad_color.message.startswith("Invalid input for update_theme")

    bad_key = executor.execute("update_theme", {"colors": {"accentColor": "#123456"}}, legacy_document)
    assert not bad_key.success
    assert bad_key.document == legacy_document


def test_update_theme_noop(executor, legacy_document):
    outcome = executor.execute("update_theme", {"primaryColor": "#3B82F6"}, legacy_document)
    assert outcome.success
    assert not outcome.changed
    assert outcome.message == "Theme already matches the request"
