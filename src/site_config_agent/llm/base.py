from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Protocol, Sequence, Union

from pydantic import BaseModel, Field


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolCallBlock(BaseModel):
    type: Literal["tool_call"] = "tool_call"
    id: str
    name: str
    input: dict[str, Any] = Field(default_factory=dict)


class ToolResultBlock(BaseModel):
    type: Literal["tool_result"] = "tool_result"
    tool_call_id: str
    name: str
    content: str
    is_error: bool = False


ContentBlock = Union[TextBlock, ToolCallBlock, ToolResultBlock]


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: list[ContentBlock] = Field(default_factory=list)

    @classmethod
    def text(cls, role: Literal["user", "assistant"], text: str) -> "ChatMessage":
        return cls(role=role, content=[TextBlock(text=text)])


class StopReason(str, Enum):
    TOOL_USE = "tool_use"
    END_TURN = "end_turn"
    STOP_SEQUENCE = "stop_sequence"
    MAX_TOKENS = "max_tokens"
    OTHER = "other"


class ModelResponse(BaseModel):
    stop_reason: StopReason
    content: list[ContentBlock] = Field(default_factory=list)
    # Provider's own stop reason, kept for logs.
    raw_stop_reason: str | None = None

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.content if isinstance(block, TextBlock))

    @property
    def tool_calls(self) -> list[ToolCallBlock]:
        return [block for block in self.content if isinstance(block, ToolCallBlock)]


class ToolDefinition(BaseModel):
    name: str
    description: str
    input_schema: dict[str, Any]


class ToolChatModel(Protocol):
    """Any hosted model that can take a system prompt, history and tools and answer or call tools."""

    def complete(
        self,
        system: str,
        messages: Sequence[ChatMessage],
        tools: Sequence[ToolDefinition],
    ) -> ModelResponse:
        ...


__all__ = [
    "ChatMessage",
    "ContentBlock",
    "ModelResponse",
    "StopReason",
    "TextBlock",
    "ToolCallBlock",
    "ToolChatModel",
    "ToolDefinition",
    "ToolResultBlock",
]
