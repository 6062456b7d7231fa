from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

from .document import SiteDocument, clone_document
from .errors import ModelProviderError, ModelResponseError
from .llm.base import ChatMessage, StopReason, ToolCallBlock, ToolChatModel, ToolResultBlock
from .models.turn import ConversationTurn, ToolInvocation, ToolResult, TurnResult
from .prompts import build_system_prompt
from .sanitizer import DocumentSanitizer
from .tools.executor import ToolExecutor
from .validator import validate

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 5
DEFAULT_HISTORY_WINDOW = 10

CHANGES_MADE_MESSAGE = "Done! I made {count} change(s) to your website."
FALLBACK_MESSAGE = (
    "I'm not sure how to help with that. Try describing what kind of website you want, "
    "or ask me to make specific changes."
)


class LoopState(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    EXECUTING_TOOLS = "executing_tools"
    DONE = "done"


class SiteConfigAgent:
    """Runs one chat turn: the model proposes tool calls, the agent applies them.

    Tool calls from one response run in order against the same working
    document, so later calls see earlier effects. The number of model round
    trips per turn is capped; reaching the cap ends the turn with whatever
    document state was reached.
    """

    def __init__(
        self,
        model: ToolChatModel,
        *,
        executor: ToolExecutor | None = None,
        sanitizer: DocumentSanitizer | None = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        history_window: int = DEFAULT_HISTORY_WINDOW,
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self._model = model
        self._executor = executor or ToolExecutor()
        self._sanitizer = sanitizer or DocumentSanitizer(self._executor.registry)
        self._max_iterations = max_iterations
        self._history_window = history_window

    def process_turn(
        self,
        user_message: str,
        current_document: SiteDocument | None = None,
        history: Iterable[ConversationTurn | Mapping[str, Any]] = (),
    ) -> TurnResult:
        """Process one user message.

        Args:
            user_message: The user's request in natural language.
            current_document: The site as last persisted, or ``None`` when no site exists yet.
            history: Prior turns, oldest first. Only the most recent window is sent.

        Returns:
            TurnResult with the reply, the resulting document and the tools that ran.

        Raises:
            ModelProviderError: The model call failed. ``partial_result`` holds the
                document reached by earlier iterations of this turn.
        """
        working = clone_document(current_document)
        messages = self._initial_messages(user_message, history)
        definitions = self._executor.definitions()
        tools_used: list[ToolInvocation] = []
        pending: list[ToolCallBlock] = []
        reply = ""
        stop_reason: str | None = None
        iterations = 0
        hit_limit = False

        state = LoopState.AWAITING_MODEL
        while state is not LoopState.DONE:
            if state is LoopState.AWAITING_MODEL:
                if iterations >= self._max_iterations:
                    hit_limit = True
                    logger.warning(
                        "Iteration cap reached; ending turn with current document",
                        extra={"iterations": iterations, "tools_used": len(tools_used)},
                    )
                    state = LoopState.DONE
                    continue
                iterations += 1
                system = build_system_prompt(self._executor.registry, self._executor.templates, working)
                logger.info("Calling model", extra={"iteration": iterations, "message_count": len(messages)})
                try:
                    response = self._model.complete(system, messages, definitions)
                except ModelResponseError as exc:
                    logger.warning("Model response could not be interpreted", extra={"error": str(exc)})
                    stop_reason = "unparseable"
                    state = LoopState.DONE
                    continue
                except Exception as exc:
                    logger.error("Model call failed", exc_info=True, extra={"iteration": iterations})
                    partial = self._result(
                        "", working, tools_used, iterations, "provider_error", hit_limit=False
                    )
                    raise ModelProviderError(f"Model call failed: {exc}", partial_result=partial) from exc

                stop_reason = response.stop_reason.value
                logger.info(
                    "Model responded",
                    extra={"iteration": iterations, "stop_reason": response.raw_stop_reason or stop_reason},
                )
                if response.stop_reason is StopReason.TOOL_USE:
                    pending = response.tool_calls
                    if not pending:
                        logger.warning("Model asked for tools without naming any", extra={"iteration": iterations})
                        state = LoopState.DONE
                        continue
                    messages.append(ChatMessage(role="assistant", content=list(response.content)))
                    state = LoopState.EXECUTING_TOOLS
                elif response.stop_reason in (StopReason.END_TURN, StopReason.STOP_SEQUENCE):
                    reply = response.text
                    state = LoopState.DONE
                else:
                    logger.warning(
                        "Unexpected stop reason; ending turn",
                        extra={"stop_reason": response.raw_stop_reason or stop_reason},
                    )
                    state = LoopState.DONE

            elif state is LoopState.EXECUTING_TOOLS:
                results: list[ToolResultBlock] = []
                for call in pending:
                    working, invocation = self._run_tool(call, working)
                    tools_used.append(invocation)
                    results.append(
                        ToolResultBlock(
                            tool_call_id=call.id,
                            name=call.name,
                            content=invocation.result.message,
                            is_error=not invocation.result.success,
                        )
                    )
                messages.append(ChatMessage(role="user", content=results))
                pending = []
                state = LoopState.AWAITING_MODEL

        return self._result(reply, working, tools_used, iterations, stop_reason, hit_limit=hit_limit)

    def generate_site_from_description(self, description: str) -> TurnResult:
        return self.process_turn(description, None, ())

    def update_site_from_feedback(
        self,
        current_document: SiteDocument | None,
        feedback: str,
        history: Iterable[ConversationTurn | Mapping[str, Any]] = (),
    ) -> TurnResult:
        return self.process_turn(feedback, current_document, history)

    def _initial_messages(
        self, user_message: str, history: Iterable[ConversationTurn | Mapping[str, Any]]
    ) -> list[ChatMessage]:
        turns = [ConversationTurn.model_validate(turn) for turn in history]
        recent = turns[-self._history_window :] if self._history_window > 0 else []
        messages = [ChatMessage.text(turn.role, turn.content) for turn in recent]
        messages.append(ChatMessage.text("user", user_message))
        return messages

    def _run_tool(
        self, call: ToolCallBlock, working: SiteDocument | None
    ) -> tuple[SiteDocument | None, ToolInvocation]:
        outcome = self._executor.execute(call.name, call.input, working)
        message = outcome.message
        if outcome.success and outcome.changed and outcome.document is not None:
            working, note = self._ensure_valid(outcome.document)
            if note:
                message = f"{message}\n{note}"
        invocation = ToolInvocation(
            name=call.name,
            input=call.input,
            result=ToolResult(
                success=outcome.success,
                message=message,
                previous_content=outcome.previous_content,
            ),
        )
        return working, invocation

    def _ensure_valid(self, document: SiteDocument) -> tuple[SiteDocument, str]:
        """Validate after a change; sanitize if needed and describe anything the repair removed."""
        report = validate(document, self._executor.registry)
        if report.valid:
            return document, ""
        logger.warning(
            "Document failed validation after tool run; sanitizing",
            extra={"error_count": len(report.errors), "errors": report.summary()},
        )
        repaired = self._sanitizer.repair(document)
        if repaired.dropped_sections:
            logger.warning("Sanitizer removed sections", extra={"dropped_sections": repaired.dropped_sections})
        return repaired.document, repaired.describe()

    @staticmethod
    def _result(
        reply: str,
        document: SiteDocument | None,
        tools_used: Sequence[ToolInvocation],
        iterations: int,
        stop_reason: str | None,
        *,
        hit_limit: bool,
    ) -> TurnResult:
        message = reply.strip()
        if not message:
            message = CHANGES_MADE_MESSAGE.format(count=len(tools_used)) if tools_used else FALLBACK_MESSAGE
        return TurnResult(
            message=message,
            new_document=dict(document) if document is not None else None,
            tools_used=list(tools_used),
            iterations=iterations,
            stop_reason=stop_reason,
            hit_iteration_limit=hit_limit,
        )


__all__ = [
    "CHANGES_MADE_MESSAGE",
    "DEFAULT_HISTORY_WINDOW",
    "DEFAULT_MAX_ITERATIONS",
    "FALLBACK_MESSAGE",
    "LoopState",
    "SiteConfigAgent",
]
