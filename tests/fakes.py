from typing import Any, Sequence

from site_config_agent.llm.base import (
    ChatMessage,
    ModelResponse,
    StopReason,
    TextBlock,
    ToolCallBlock,
    ToolDefinition,
)


def tool_call(tool_name: str, call_id: str = "call-1", **tool_input: Any) -> ModelResponse:
    return ModelResponse(
        stop_reason=StopReason.TOOL_USE,
        content=[ToolCallBlock(id=call_id, name=tool_name, input=tool_input)],
    )


def tool_calls(*calls: tuple[str, dict]) -> ModelResponse:
    return ModelResponse(
        stop_reason=StopReason.TOOL_USE,
        content=[
            ToolCallBlock(id=f"call-{index}", name=name, input=tool_input)
            for index, (name, tool_input) in enumerate(calls)
        ],
    )


def final_answer(text: str) -> ModelResponse:
    return ModelResponse(stop_reason=StopReason.END_TURN, content=[TextBlock(text=text)])


class ScriptedModel:
    """Returns queued responses in order; callables are invoked with the request."""

    def __init__(self, *responses: Any) -> None:
        self._responses = list(responses)
        self.requests: list[dict[str, Any]] = []

    def complete(
        self,
        system: str,
        messages: Sequence[ChatMessage],
        tools: Sequence[ToolDefinition],
    ) -> ModelResponse:
        self.requests.append({"system": system, "messages": list(messages), "tools": list(tools)})
        if not self._responses:
            raise AssertionError("ScriptedModel ran out of responses")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(system, messages, tools)
        return response


class LoopingModel:
    """Asks for the same tool forever."""

    def __init__(self, name: str, tool_input: dict) -> None:
        self.name = name
        self.tool_input = tool_input
        self.calls = 0

    def complete(self, system, messages, tools) -> ModelResponse:
        self.calls += 1
        return tool_call(self.name, call_id=f"call-{self.calls}", **self.tool_input)
