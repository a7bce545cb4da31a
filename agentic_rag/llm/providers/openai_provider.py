"""OpenAI LLM client with tool-calling support."""

import time
from typing import Any

import structlog
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    InternalServerError,
    PermissionDeniedError,
    RateLimitError,
)

from agentic_rag.llm.base_provider import (
    ConversationMessage,
    LLMClient,
    LLMResponse,
    MessageRole,
    Tool,
    ToolCall,
    answered_tool_call_ids,
)
from agentic_rag.llm.pricing import pricing_calculator
from agentic_rag.utils.exceptions import (
    LLMInvalidResponseError,
    LLMProviderError,
    LLMQuotaExceededError,
    LLMTimeoutError,
    LLMUnavailableError,
)

logger = structlog.get_logger(__name__)


def to_openai_message(
    message: ConversationMessage, answered_ids: set[str] | None = None
) -> dict[str, Any]:
    """Convert a transcript message into an OpenAI chat message.

    When ``answered_ids`` is given, assistant tool calls without a matching
    tool result are dropped.
    """
    payload: dict[str, Any] = {"role": message.role.value, "content": message.content}

    tool_calls = message.tool_calls
    if answered_ids is not None:
        tool_calls = [call for call in tool_calls if call.id in answered_ids]

    if message.role is MessageRole.ASSISTANT and tool_calls:
        payload["content"] = message.content or None
        payload["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {"name": call.name, "arguments": call.arguments},
            }
            for call in tool_calls
        ]

    if message.role is MessageRole.TOOL:
        payload["tool_call_id"] = message.tool_call_id

    return payload


def to_openai_messages(messages: list[ConversationMessage]) -> list[dict[str, Any]]:
    """Convert a transcript, replaying only tool calls that have results."""
    answered_ids = answered_tool_call_ids(messages)
    return [to_openai_message(message, answered_ids) for message in messages]


def to_openai_tool(tool: Tool) -> dict[str, Any]:
    """Convert a tool declaration into an OpenAI function tool."""
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description,
            "parameters": tool.parameters,
        },
    }


class OpenAIClient(LLMClient):
    """LLM client backed by the OpenAI chat completions API."""

    DEFAULT_MODEL = "gpt-4-turbo-preview"

    def __init__(self, api_key: str, model: str | None = None, max_retries: int = 0) -> None:
        """Initialize the client.

        Args:
            api_key: OpenAI API key
            model: Chat model identifier
            max_retries: Transport-level retries performed by the SDK
        """
        self.model = model or self.DEFAULT_MODEL
        self.client = AsyncOpenAI(api_key=api_key, max_retries=max_retries)

        logger.info("openai_client_initialized", model=self.model, max_retries=max_retries)

    def get_model(self) -> str:
        """Get the configured model identifier."""
        return self.model

    async def generate_response(
        self,
        messages: list[ConversationMessage],
        tools: list[Tool] | None = None,
    ) -> LLMResponse:
        """Generate the next assistant turn via chat completions."""
        start_time = time.perf_counter()

        request: dict[str, Any] = {
            "model": self.model,
            "messages": to_openai_messages(messages),
        }
        if tools:
            request["tools"] = [to_openai_tool(tool) for tool in tools]

        try:
            response = await self.client.chat.completions.create(**request)
        except APITimeoutError as e:
            logger.error("openai_timeout", model=self.model, error=str(e))
            raise LLMTimeoutError(f"OpenAI request timed out: {e}") from e
        except RateLimitError as e:
            logger.error("openai_quota_exceeded", model=self.model, error=str(e))
            raise LLMQuotaExceededError(f"OpenAI quota exceeded: {e}") from e
        except (
            APIConnectionError,
            AuthenticationError,
            PermissionDeniedError,
            InternalServerError,
        ) as e:
            logger.error("openai_unavailable", model=self.model, error=str(e))
            raise LLMUnavailableError(f"OpenAI unavailable: {e}") from e
        except APIStatusError as e:
            logger.error("openai_request_failed", model=self.model, status_code=e.status_code)
            raise LLMProviderError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            logger.error("openai_empty_choices", model=self.model)
            raise LLMInvalidResponseError("OpenAI returned no choices")

        choice = response.choices[0]
        tool_calls = [
            ToolCall(id=call.id, name=call.function.name, arguments=call.function.arguments)
            for call in (choice.message.tool_calls or [])
        ]

        usage = response.usage
        tokens_prompt = usage.prompt_tokens if usage else 0
        tokens_completion = usage.completion_tokens if usage else 0
        model = response.model or self.model

        logger.info(
            "openai_generation_success",
            model=model,
            tool_calls=len(tool_calls),
            tokens_prompt=tokens_prompt,
            tokens_completion=tokens_completion,
            cost_usd=pricing_calculator.calculate_cost(model, tokens_prompt, tokens_completion),
            latency_ms=int((time.perf_counter() - start_time) * 1000),
        )

        return LLMResponse(
            content=choice.message.content or "",
            tool_calls=tool_calls,
            tokens_used=usage.total_tokens if usage else 0,
            model=model,
            finish_reason=str(choice.finish_reason or ""),
        )

    async def health_check(self) -> None:
        """Send a minimal prompt to verify connectivity."""
        try:
            await self._probe()
        except LLMProviderError as e:
            raise LLMUnavailableError(f"OpenAI health check failed: {e}") from e
