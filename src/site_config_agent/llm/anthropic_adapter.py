from __future__ import annotations

import logging
import os
from typing import Any, Sequence

import anthropic

from ..errors import ModelResponseError
from .base import (
    ChatMessage,
    ContentBlock,
    ModelResponse,
    StopReason,
    TextBlock,
    ToolCallBlock,
    ToolDefinition,
    ToolResultBlock,
)

logger = logging.getLogger(__name__)

_STOP_REASONS = {
    "tool_use": StopReason.TOOL_USE,
    "end_turn": StopReason.END_TURN,
    "stop_sequence": StopReason.STOP_SEQUENCE,
    "max_tokens": StopReason.MAX_TOKENS,
}


def _block_payload(block: ContentBlock) -> dict[str, Any] | None:
    if isinstance(block, TextBlock):
        return {"type": "text", "text": block.text} if block.text else None
    if isinstance(block, ToolCallBlock):
        return {"type": "tool_use", "id": block.id, "name": block.name, "input": block.input}
    if isinstance(block, ToolResultBlock):
        return {
            "type": "tool_result",
            "tool_use_id": block.tool_call_id,
            "content": block.content,
            "is_error": block.is_error,
        }
    return None


def to_anthropic_messages(messages: Sequence[ChatMessage]) -> list[dict[str, Any]]:
    """Messages API wants user-first, alternating roles and no empty text."""
    converted: list[dict[str, Any]] = []
    for message in messages:
        blocks = [payload for payload in map(_block_payload, message.content) if payload is not None]
        if not blocks:
            continue
        if not converted and message.role == "assistant":
            continue
        if converted and converted[-1]["role"] == message.role:
            converted[-1]["content"].extend(blocks)
        else:
            converted.append({"role": message.role, "content": blocks})
    return converted


class AnthropicToolModel:
    """Tool-calling chat model backed by the Anthropic Messages API."""

    def __init__(
        self,
        *,
        model_name: str = "claude-sonnet-4-5",
        max_tokens: int = 4096,
        temperature: float = 0.7,
        api_key: str | None = None,
        client: anthropic.Anthropic | None = None,
    ) -> None:
        """Initialize the Anthropic adapter.

        Args:
            model_name: Model name passed to the Messages API
            max_tokens: Maximum output tokens per call
            temperature: Sampling temperature (0.0 - 1.0)
            api_key: API key; defaults to ANTHROPIC_API_KEY
            client: Pre-built client, mainly for tests
        """
        self.model_name = model_name
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.client = client or anthropic.Anthropic(api_key=api_key or os.getenv("ANTHROPIC_API_KEY"))

    def complete(
        self,
        system: str,
        messages: Sequence[ChatMessage],
        tools: Sequence[ToolDefinition],
    ) -> ModelResponse:
        kwargs: dict[str, Any] = {
            "model": self.model_name,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "system": system,
            "messages": to_anthropic_messages(messages),
        }
        if tools:
            kwargs["tools"] = [tool.model_dump() for tool in tools]

        response = self.client.messages.create(**kwargs)

        content: list[ContentBlock] = []
        for block in response.content:
            if block.type == "text":
                content.append(TextBlock(text=block.text))
            elif block.type == "tool_use":
                if not isinstance(block.input, dict):
                    raise ModelResponseError(f"Tool call {block.name} has non-object input")
                content.append(ToolCallBlock(id=block.id, name=block.name, input=block.input))

        raw = response.stop_reason
        logger.info(
            "Anthropic response received",
            extra={
                "model": self.model_name,
                "stop_reason": raw,
                "input_tokens": getattr(response.usage, "input_tokens", None),
                "output_tokens": getattr(response.usage, "output_tokens", None),
            },
        )
        return ModelResponse(
            stop_reason=_STOP_REASONS.get(raw or "", StopReason.OTHER),
            content=content,
            raw_stop_reason=raw,
        )


__all__ = ["AnthropicToolModel", "to_anthropic_messages"]
