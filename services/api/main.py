from __future__ import annotations

import asyncio
import logging
import os
from functools import lru_cache
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from site_config_agent.agent import SiteConfigAgent
from site_config_agent.config import AgentSettings, build_model_client
from site_config_agent.document import new_document
from site_config_agent.errors import ModelProviderError
from site_config_agent.locks import DocumentTurnLocks
from site_config_agent.logging_config import set_trace_id, setup_logging
from site_config_agent.models.turn import ConversationTurn, TurnResult
from site_config_agent.models.validation import SanitizeReport, ValidationReport
from site_config_agent.page_templates import DEFAULT_PAGE_TEMPLATE_CATALOG
from site_config_agent.sanitizer import DocumentSanitizer
from site_config_agent.schema_registry import DEFAULT_REGISTRY, DEFAULT_SITE_NAME
from site_config_agent.tools.executor import ToolExecutor
from site_config_agent.validator import validate

logger = logging.getLogger(__name__)


class ChatTurnRequest(BaseModel):
    message: str = Field(min_length=1)
    document: dict[str, Any] | None = None
    history: list[ConversationTurn] = Field(default_factory=list)


class DocumentRequest(BaseModel):
    document: Any = None


class DocumentResponse(BaseModel):
    document: dict[str, Any]


class NewDocumentRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    site_name: str = Field(default=DEFAULT_SITE_NAME, min_length=1, max_length=100)
    theme_preset: str | None = None


# Environment configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
PROJECT_ID = os.getenv("PROJECT_ID")
TURN_LOCK_TIMEOUT_SECONDS = float(os.getenv("TURN_LOCK_TIMEOUT_SECONDS", "30"))

# Setup logging
setup_logging(environment=ENVIRONMENT, project_id=PROJECT_ID)

app = FastAPI(title="Site Config Agent API", version="0.1.0")

turn_locks = DocumentTurnLocks()
sanitizer = DocumentSanitizer(DEFAULT_REGISTRY)


@lru_cache(maxsize=1)
def get_agent() -> SiteConfigAgent:
    settings = AgentSettings.from_env()
    return SiteConfigAgent(
        build_model_client(settings),
        executor=ToolExecutor(),
        max_iterations=settings.max_iterations,
        history_window=settings.history_window,
    )


def _run_turn(agent: SiteConfigAgent, site_id: str, request: ChatTurnRequest) -> TurnResult:
    with turn_locks.hold(site_id, timeout=TURN_LOCK_TIMEOUT_SECONDS):
        return agent.process_turn(request.message, request.document, request.history)


@app.post("/v1/sites/{site_id}/chat:turn", response_model=TurnResult)
async def chat_turn(
    site_id: str,
    request: ChatTurnRequest,
    agent: SiteConfigAgent = Depends(get_agent),
    x_cloud_trace_context: str | None = Header(default=None),
) -> TurnResult:
    if x_cloud_trace_context:
        set_trace_id(x_cloud_trace_context.split("/")[0])
    try:
        return await asyncio.to_thread(_run_turn, agent, site_id, request)
    except TimeoutError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ModelProviderError as exc:
        logger.error("Chat turn failed upstream", extra={"site_id": site_id, "error": str(exc)})
        partial = exc.partial_result
        return JSONResponse(
            status_code=502,
            content={
                "detail": str(exc),
                "partialResult": partial.model_dump(mode="json", by_alias=True) if partial else None,
            },
        )


@app.post("/v1/documents:validate", response_model=ValidationReport)
async def validate_document(request: DocumentRequest) -> ValidationReport:
    return validate(request.document, DEFAULT_REGISTRY)


@app.post("/v1/documents:sanitize", response_model=SanitizeReport)
async def sanitize_document(request: DocumentRequest) -> SanitizeReport:
    return sanitizer.repair(request.document)


@app.post("/v1/documents:new", response_model=DocumentResponse)
async def create_document(request: NewDocumentRequest) -> DocumentResponse:
    if request.theme_preset and DEFAULT_REGISTRY.theme_preset(request.theme_preset) is None:
        raise HTTPException(status_code=422, detail=f"Unknown theme preset: {request.theme_preset}")
    return DocumentResponse(document=new_document(DEFAULT_REGISTRY, request.site_name, request.theme_preset))


@app.get("/v1/section-types")
async def list_section_types() -> JSONResponse:
    types = []
    for section_type in DEFAULT_REGISTRY.list_types():
        definition = DEFAULT_REGISTRY.require_definition(section_type)
        types.append(
            {
                "type": definition.type,
                "displayName": definition.display_name,
                "description": definition.description,
                "requiredFields": list(definition.required_fields),
                "fields": list(definition.field_names),
                "defaultContent": definition.new_content(),
            }
        )
    return JSONResponse(
        {
            "sectionTypes": types,
            "icons": DEFAULT_REGISTRY.list_icons(),
            "themePresets": DEFAULT_REGISTRY.list_theme_presets(),
            "navigationStyles": DEFAULT_REGISTRY.list_navigation_styles(),
        }
    )


@app.get("/v1/page-templates")
async def list_page_templates() -> JSONResponse:
    return JSONResponse({"templates": DEFAULT_PAGE_TEMPLATE_CATALOG.list_templates()})


@app.get("/health")
async def healthcheck() -> JSONResponse:
    return JSONResponse({"status": "ok"})
