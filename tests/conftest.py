import json
from pathlib import Path

import pytest

from site_config_agent.tools.executor import ToolExecutor

DOCUMENTS_DIR = Path(__file__).resolve().parent.parent / "data" / "documents"


def load_document(name: str) -> dict:
    fixture_path = DOCUMENTS_DIR / f"{name}.json"
    return json.loads(fixture_path.read_text(encoding="utf-8"))


@pytest.fixture
def legacy_document() -> dict:
    return load_document("legacy_site")


@pytest.fixture
def multi_page_document() -> dict:
    return load_document("multi_page_site")


@pytest.fixture
def malformed_document() -> dict:
    return load_document("malformed_site")


@pytest.fixture
def executor() -> ToolExecutor:
    return ToolExecutor()
