import copy

import pytest

from site_config_agent.sanitizer import DocumentSanitizer, sanitize
from site_config_agent.validator import validate


def _fixed_clock() -> float:
    return 1700000000.0


@pytest.mark.parametrize(
    "document",
    [
        None,
        {},
        "garbage",
        {"siteName": "", "theme": "blue", "sections": "nope"},
        {"siteName": "x" * 300, "sections": [{"type": "hero"}, {"type": "footer", "content": None}]},
        {"siteName": "Acme", "pages": "broken", "sections": [{"id": "a", "type": "about", "order": 9}]},
        {"siteName": "Acme", "pages": [], "navigation": 5, "footer": "tiny"},
        {"siteName": "Acme", "pages": [{"id": "p", "isHome": False, "sections": [{"type": "gallery", "content": {"columns": 40, "images": [{"caption": "no url"}]}}]}]},
        {"siteName": "Acme", "pages": 5},
        {"siteName": "Acme", "pages": [{"id": "home", "isHome": True, "slug": "", "name": "Home", "sections": []}], "navigation": {"links": [{"pageId": ["home"], "label": "x"}, {"pageId": {"id": "home"}}, {"pageId": "home"}]}},
        {"siteName": "Acme", "sections": [{"id": ["a"], "type": ["hero"]}, {"id": {"x": 1}, "type": "about"}]},
    ],
)
def test_sanitized_documents_always_validate(document):
    report = validate(sanitize(document))
    assert report.valid, report.errors


def test_malformed_fixture_is_repaired(malformed_document):
    repaired = DocumentSanitizer(clock=_fixed_clock).sanitize(malformed_document)
    report = validate(repaired)
    assert report.valid, report.errors

    assert repaired["siteName"] == "My Website"
    assert repaired["theme"]["primaryColor"] == "#3B82F6"
    assert repaired["theme"]["fontFamily"] == "Inter"
    assert repaired["customDomain"] == "acme.com"

    start, about = repaired["pages"]
    assert start["id"] == "page-1700000000000-0"
    assert start["isHome"] is False
    assert start["slug"] == "start"
    assert about["isHome"] is True
    assert about["slug"] == ""

    # sorted by incoming order: hero (no order), pricing (3), features (7); carousel dropped
    assert [section["type"] for section in start["sections"]] == ["hero", "pricing", "features"]
    assert [section["order"] for section in start["sections"]] == [0, 1, 2]
    hero = start["sections"][0]
    assert hero["id"] == "hero-1700000000000-0"
    assert hero["visible"] is True
    assert hero["content"]["headline"] == "Build Something Amazing"
    assert hero["content"]["subheadline"] == "No headline here"
    assert hero["content"]["trackingId"] == "abc"
    assert start["sections"][1]["id"] == "pricing-1700000000000-2"
    assert len(start["sections"][1]["content"]["items"]) == 1

    assert about["sections"][0]["content"]["imagePosition"] == "right"
    members = about["sections"][1]["content"]["members"]
    assert members[1] == {"name": "Kim", "email": None}

    assert repaired["navigation"]["style"] == "fixed-top"
    assert repaired["navigation"]["links"] == [{"pageId": "page-a", "label": "About"}]


def test_sanitize_does_not_touch_input(malformed_document):
    snapshot = copy.deepcopy(malformed_document)
    sanitize(malformed_document)
    assert malformed_document == snapshot


def test_valid_document_passes_through_unchanged(multi_page_document):
    assert sanitize(multi_page_document) == multi_page_document


def test_overlong_strings_are_truncated(legacy_document):
    legacy_document["sections"][0]["content"]["headline"] = "H" * 150
    repaired = sanitize(legacy_document)
    assert repaired["sections"][0]["content"]["headline"] == "H" * 100


def test_root_sections_on_multi_page_document_move_to_home(multi_page_document):
    multi_page_document["sections"] = [
        {"id": "pricing-x", "type": "pricing", "order": 0, "visible": True, "content": {"title": "Plans", "items": [{"name": "Basic", "price": "$5"}]}}
    ]
    repaired = sanitize(multi_page_document)
    assert "sections" not in repaired
    assert "pricing-x" in [section["id"] for section in repaired["pages"][0]["sections"]]
    assert validate(repaired).valid


def test_navigation_links_with_non_string_page_ids_are_dropped(multi_page_document):
    multi_page_document["navigation"]["links"] = [
        {"pageId": ["home"], "label": "List"},
        {"pageId": {"id": "page-about"}, "label": "Object"},
        {"pageId": "page-about"},
    ]
    repaired = sanitize(multi_page_document)
    assert repaired["navigation"]["links"] == [{"pageId": "page-about", "label": "About"}]


def test_repair_reports_sections_with_unknown_types(multi_page_document):
    multi_page_document["pages"][1]["sections"].append(
        {"id": "carousel-1", "type": "carousel", "order": 1, "visible": True, "content": {}}
    )
    report = DocumentSanitizer(clock=_fixed_clock).repair(multi_page_document)
    assert report.dropped_sections == ["carousel-1 (carousel)"]
    assert report.describe() == "Removed sections with unknown types: carousel-1 (carousel)"
    assert [section["id"] for section in report.document["pages"][1]["sections"]] == ["story-about"]


def test_repair_of_valid_document_reports_nothing(legacy_document):
    report = DocumentSanitizer(clock=_fixed_clock).repair(legacy_document)
    assert report.dropped_sections == []
    assert report.describe() == ""
