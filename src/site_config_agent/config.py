from __future__ import annotations

import os
from typing import Literal, Mapping

from pydantic import BaseModel, Field

from .llm.base import ToolChatModel

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5"
DEFAULT_VERTEX_MODEL = "gemini-1.5-pro"


class AgentSettings(BaseModel):
    environment: str = "dev"
    project_id: str | None = None
    llm_provider: Literal["anthropic", "vertexai"] = "anthropic"
    model_name: str | None = None
    vertex_location: str = "asia-northeast1"
    max_iterations: int = Field(default=5, ge=1)
    history_window: int = Field(default=10, ge=0)
    max_tokens: int = Field(default=4096, ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AgentSettings":
        env = os.environ if environ is None else environ
        values = {
            "environment": env.get("ENVIRONMENT"),
            "project_id": env.get("PROJECT_ID"),
            "llm_provider": env.get("LLM_PROVIDER"),
            "model_name": env.get("AGENT_MODEL"),
            "vertex_location": env.get("VERTEX_LOCATION"),
            "max_iterations": env.get("AGENT_MAX_ITERATIONS"),
            "history_window": env.get("AGENT_HISTORY_WINDOW"),
            "max_tokens": env.get("AGENT_MAX_TOKENS"),
            "temperature": env.get("AGENT_TEMPERATURE"),
        }
        return cls.model_validate({key: value for key, value in values.items() if value not in (None, "")})

    @property
    def resolved_model_name(self) -> str:
        if self.model_name:
            return self.model_name
        return DEFAULT_VERTEX_MODEL if self.llm_provider == "vertexai" else DEFAULT_ANTHROPIC_MODEL


def build_model_client(settings: AgentSettings) -> ToolChatModel:
    """Construct the configured provider adapter; SDK imports stay local to the chosen one."""
    if settings.llm_provider == "vertexai":
        if not settings.project_id:
            raise ValueError("PROJECT_ID is required when LLM_PROVIDER=vertexai")
        from .llm.vertex_ai_adapter import VertexAIToolModel

        return VertexAIToolModel(
            project_id=settings.project_id,
            location=settings.vertex_location,
            model_name=settings.resolved_model_name,
            max_output_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )

    from .llm.anthropic_adapter import AnthropicToolModel

    return AnthropicToolModel(
        model_name=settings.resolved_model_name,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )


__all__ = ["AgentSettings", "build_model_client"]
