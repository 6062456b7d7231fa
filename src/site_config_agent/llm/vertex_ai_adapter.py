from __future__ import annotations

import copy
import json
import logging
import uuid
from typing import Any, Sequence

import vertexai
from vertexai.generative_models import (
    Content,
    FunctionDeclaration,
    GenerationConfig,
    GenerativeModel,
    Part,
    Tool,
)

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

_FINISH_REASONS = {
    "STOP": StopReason.END_TURN,
    "MAX_TOKENS": StopReason.MAX_TOKENS,
}

_FREE_FORM_HINT = " Pass the object as a JSON-encoded string."


def _is_free_form_object(schema: dict[str, Any]) -> bool:
    return schema.get("type") == "object" and not schema.get("properties")


def encode_schema(schema: dict[str, Any], *, top_level: bool = True) -> dict[str, Any]:
    """Rewrite a JSON schema into the subset Gemini function declarations accept.

    Gemini rejects objects without declared properties, so free-form objects
    travel as JSON strings and are decoded again by :func:`decode_arguments`.
    """
    if not top_level and _is_free_form_object(schema):
        return {"type": "string", "description": (schema.get("description") or "JSON object.") + _FREE_FORM_HINT}
    encoded = copy.deepcopy(schema)
    if schema.get("type") == "object":
        encoded["properties"] = {
            name: encode_schema(child, top_level=False) for name, child in schema.get("properties", {}).items()
        }
    if schema.get("type") == "array" and isinstance(schema.get("items"), dict):
        encoded["items"] = encode_schema(schema["items"], top_level=False)
    return encoded


def decode_arguments(value: Any, schema: dict[str, Any], *, top_level: bool = True) -> Any:
    if not top_level and _is_free_form_object(schema):
        if isinstance(value, str):
            try:
                value = json.loads(value) if value.strip() else {}
            except json.JSONDecodeError as exc:
                raise ModelResponseError(f"Invalid JSON object argument: {exc}") from exc
        return value
    if schema.get("type") == "object" and isinstance(value, dict):
        properties = schema.get("properties", {})
        return {key: decode_arguments(item, properties.get(key, {}), top_level=False) for key, item in value.items()}
    if schema.get("type") == "array" and isinstance(value, list) and isinstance(schema.get("items"), dict):
        return [decode_arguments(item, schema["items"], top_level=False) for item in value]
    return value


def _to_parts(blocks: Sequence[ContentBlock]) -> list[Part]:
    parts: list[Part] = []
    for block in blocks:
        if isinstance(block, TextBlock) and block.text:
            parts.append(Part.from_text(block.text))
        elif isinstance(block, ToolCallBlock):
            parts.append(Part.from_dict({"function_call": {"name": block.name, "args": block.input}}))
        elif isinstance(block, ToolResultBlock):
            key = "error" if block.is_error else "result"
            parts.append(Part.from_function_response(name=block.name, response={key: block.content}))
    return parts


class VertexAIToolModel:
    """Tool-calling chat model backed by Vertex AI Gemini function calling."""

    def __init__(
        self,
        *,
        project_id: str,
        location: str = "asia-northeast1",
        model_name: str = "gemini-1.5-pro",
        max_output_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> None:
        """Initialize Vertex AI adapter.

        Args:
            project_id: GCP project ID
            location: Vertex AI location
            model_name: Model name (e.g., "gemini-1.5-pro")
            max_output_tokens: Maximum output tokens per call
            temperature: Sampling temperature (0.0 - 1.0)
        """
        self.project_id = project_id
        self.location = location
        self.model_name = model_name
        self.max_output_tokens = max_output_tokens
        self.temperature = temperature

        vertexai.init(project=project_id, location=location)

    def complete(
        self,
        system: str,
        messages: Sequence[ChatMessage],
        tools: Sequence[ToolDefinition],
    ) -> ModelResponse:
        """Send one round of the conversation to Gemini.

        Args:
            system: System instruction, rebuilt by the caller every round
            messages: Conversation so far in provider-neutral blocks
            tools: Tool catalog to declare

        Returns:
            Normalized response; function calls become tool-call blocks
        """
        schemas = {tool.name: tool.input_schema for tool in tools}
        model = GenerativeModel(self.model_name, system_instruction=system)
        contents = []
        for message in messages:
            parts = _to_parts(message.content)
            if parts:
                contents.append(Content(role="model" if message.role == "assistant" else "user", parts=parts))
        declarations = [
            FunctionDeclaration(
                name=tool.name,
                description=tool.description,
                parameters=encode_schema(tool.input_schema),
            )
            for tool in tools
        ]

        response = model.generate_content(
            contents,
            generation_config=GenerationConfig(
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
            ),
            tools=[Tool(function_declarations=declarations)] if declarations else None,
        )
        if not response.candidates:
            raise ModelResponseError("Vertex AI returned no candidates")
        candidate = response.candidates[0]

        content: list[ContentBlock] = []
        for part in candidate.content.parts:
            data = part.to_dict()
            if "function_call" in data:
                call = data["function_call"]
                name = call.get("name")
                if not name:
                    raise ModelResponseError("Function call without a name")
                arguments = decode_arguments(call.get("args") or {}, schemas.get(name, {}))
                content.append(ToolCallBlock(id=f"call-{uuid.uuid4().hex[:12]}", name=name, input=arguments))
            elif data.get("text"):
                content.append(TextBlock(text=data["text"]))

        raw = getattr(candidate.finish_reason, "name", str(candidate.finish_reason))
        if any(isinstance(block, ToolCallBlock) for block in content):
            stop_reason = StopReason.TOOL_USE
        else:
            stop_reason = _FINISH_REASONS.get(raw, StopReason.OTHER)

        logger.info(
            "Vertex AI response received",
            extra={"model": self.model_name, "finish_reason": raw, "part_count": len(content)},
        )
        return ModelResponse(stop_reason=stop_reason, content=content, raw_stop_reason=raw)


__all__ = ["VertexAIToolModel", "decode_arguments", "encode_schema"]
