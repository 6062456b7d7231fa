from __future__ import annotations

from typing import Any, Literal, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ConversationTurn(BaseModel):
    role: Literal["user", "assistant"] = "user"
    content: str


class ToolResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    message: str
    previous_content: Mapping[str, Any] | None = None


class ToolInvocation(BaseModel):
    """One tool call made during a turn. Not persisted with the document."""

    name: str
    input: Mapping[str, Any] = Field(default_factory=dict)
    result: ToolResult


class TurnResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    new_document: dict[str, Any] | None = None
    tools_used: Sequence[ToolInvocation] = Field(default_factory=list)
    iterations: int = 0
    stop_reason: str | None = None
    hit_iteration_limit: bool = False


__all__ = ["ConversationTurn", "ToolInvocation", "ToolResult", "TurnResult"]
