import pytest
from fastapi.testclient import TestClient

from services.api import main
from site_config_agent.agent import SiteConfigAgent

from fakes import ScriptedModel, final_answer, tool_call


@pytest.fixture
def client():
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


def _use_model(model):
    main.app.dependency_overrides[main.get_agent] = lambda: SiteConfigAgent(model)


def test_chat_turn_returns_camel_case_result(client, legacy_document):
    _use_model(
        ScriptedModel(
            tool_call("update_section", sectionType="hero", content={"headline": "New"}),
            final_answer("Headline updated."),
        )
    )
    response = client.post(
        "/v1/sites/site-1/chat:turn",
        json={"message": "Change the headline to New", "document": legacy_document},
        headers={"X-Cloud-Trace-Context": "abc123/1;o=1"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Headline updated."
    assert body["newDocument"]["sections"][0]["content"]["headline"] == "New"
    assert body["toolsUsed"][0]["result"]["previousContent"] == {"headline": "Old"}
    assert body["hitIterationLimit"] is False


def test_chat_turn_provider_failure_returns_partial_result(client, legacy_document):
    _use_model(
        ScriptedModel(
            tool_call("remove_section", sectionId="about-1"),
            RuntimeError("upstream unavailable"),
        )
    )
    response = client.post("/v1/sites/site-1/chat:turn", json={"message": "remove about", "document": legacy_document})
    assert response.status_code == 502
    partial = response.json()["partialResult"]
    assert [section["id"] for section in partial["newDocument"]["sections"]] == ["hero-1", "contact-1"]


def test_chat_turn_conflicts_while_site_is_busy(client, legacy_document, monkeypatch):
    _use_model(ScriptedModel(final_answer("unused")))
    monkeypatch.setattr(main, "TURN_LOCK_TIMEOUT_SECONDS", 0)
    with main.turn_locks.hold("busy-site"):
        assert main.turn_locks.is_busy("busy-site")
        response = client.post("/v1/sites/busy-site/chat:turn", json={"message": "hi", "document": legacy_document})
    assert response.status_code == 409
    assert not main.turn_locks.is_busy("busy-site")


def test_chat_turn_requires_message(client):
    response = client.post("/v1/sites/site-1/chat:turn", json={"message": ""})
    assert response.status_code == 422


def test_validate_endpoint(client, legacy_document):
    assert client.post("/v1/documents:validate", json={"document": legacy_document}).json() == {
        "valid": True,
        "errors": [],
    }
    report = client.post("/v1/documents:validate", json={"document": {"siteName": "x"}}).json()
    assert report["valid"] is False
    assert report["errors"]


def test_sanitize_endpoint(client, malformed_document):
    response = client.post("/v1/documents:sanitize", json={"document": malformed_document})
    assert response.status_code == 200
    repaired = response.json()["document"]
    assert client.post("/v1/documents:validate", json={"document": repaired}).json()["valid"] is True
    assert response.json()["droppedSections"] == ["mystery-1 (carousel)"]


def test_validate_endpoint_reports_non_list_pages(client):
    response = client.post("/v1/documents:validate", json={"document": {"siteName": "Acme", "pages": 5}})
    assert response.status_code == 200
    assert "pages must be a non-empty array" in response.json()["errors"]


def test_new_document_endpoint(client):
    response = client.post("/v1/documents:new", json={"siteName": "Fresh", "themePreset": "green"})
    assert response.status_code == 200
    document = response.json()["document"]
    assert document["siteName"] == "Fresh"
    assert document["pages"][0]["isHome"] is True

    assert client.post("/v1/documents:new", json={"themePreset": "neon"}).status_code == 422


def test_catalog_endpoints(client):
    catalog = client.get("/v1/section-types").json()
    assert [entry["type"] for entry in catalog["sectionTypes"]][0] == "hero"
    assert "star" in catalog["icons"]
    assert "fixed-top" in catalog["navigationStyles"]

    templates = client.get("/v1/page-templates").json()["templates"]
    assert {template["id"] for template in templates} >= {"about", "services", "contact"}

    assert client.get("/health").json() == {"status": "ok"}
