"""Anthropic LLM client with tool-use support."""

import json
import time
from typing import Any

import structlog
from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncAnthropic,
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


def _tool_input(arguments: str) -> dict[str, Any]:
    """Decode tool arguments for replay; undecodable arguments become {}."""
    try:
        value = json.loads(arguments)
    except (TypeError, ValueError):
        return {}
    return value if isinstance(value, dict) else {}


def to_anthropic_messages(
    messages: list[ConversationMessage], flatten_tools: bool = False
) -> list[dict[str, Any]]:
    """Convert a transcript into Anthropic messages.

    Assistant tool calls become ``tool_use`` blocks and tool results become
    ``tool_result`` blocks in a user turn. Tool calls without a matching
    result are dropped. Consecutive turns of the same role are merged, since
    the API requires alternating roles.

    With ``flatten_tools`` both kinds of block are rendered as text instead,
    for requests that declare no tools: the API rejects tool blocks there.
    """
    answered_ids = answered_tool_call_ids(messages)
    converted: list[dict[str, Any]] = []

    for message in messages:
        if message.role is MessageRole.ASSISTANT:
            role = "assistant"
            blocks: list[dict[str, Any]] = []
            if message.content:
                blocks.append({"type": "text", "text": message.content})
            for call in message.tool_calls:
                if call.id not in answered_ids:
                    continue
                if flatten_tools:
                    blocks.append(
                        {"type": "text", "text": f"Called {call.name} with {call.arguments}"}
                    )
                else:
                    blocks.append(
                        {
                            "type": "tool_use",
                            "id": call.id,
                            "name": call.name,
                            "input": _tool_input(call.arguments),
                        }
                    )
        elif message.role is MessageRole.TOOL:
            role = "user"
            if flatten_tools:
                blocks = [
                    {"type": "text", "text": f"Result of {message.tool_name}: {message.content}"}
                ]
            else:
                blocks = [
                    {
                        "type": "tool_result",
                        "tool_use_id": message.tool_call_id,
                        "content": message.content,
                    }
                ]
        else:
            role = "user"
            blocks = [{"type": "text", "text": message.content}]

        if not blocks:
            continue

        if converted and converted[-1]["role"] == role:
            converted[-1]["content"].extend(blocks)
        else:
            converted.append({"role": role, "content": blocks})

    return converted


def to_anthropic_tool(tool: Tool) -> dict[str, Any]:
    """Convert a tool declaration into an Anthropic tool definition."""
    return {
        "name": tool.name,
        "description": tool.description,
        "input_schema": tool.parameters,
    }


class AnthropicClient(LLMClient):
    """LLM client backed by the Anthropic messages API."""

    DEFAULT_MODEL = "claude-sonnet-4-5"
    DEFAULT_MAX_TOKENS = 1024

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        max_retries: int = 0,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Anthropic API key
            model: Claude model identifier
            max_retries: Transport-level retries performed by the SDK
            max_tokens: Maximum tokens to generate per call
        """
        self.model = model or self.DEFAULT_MODEL
        self.max_tokens = max_tokens
        self.client = AsyncAnthropic(api_key=api_key, max_retries=max_retries)

        logger.info("anthropic_client_initialized", model=self.model, max_retries=max_retries)

    def get_model(self) -> str:
        """Get the configured model identifier."""
        return self.model

    async def generate_response(
        self,
        messages: list[ConversationMessage],
        tools: list[Tool] | None = None,
    ) -> LLMResponse:
        """Generate the next assistant turn via the messages API."""
        start_time = time.perf_counter()

        request: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": to_anthropic_messages(messages, flatten_tools=not tools),
        }
        if tools:
            request["tools"] = [to_anthropic_tool(tool) for tool in tools]

        try:
            response = await self.client.messages.create(**request)
        except APITimeoutError as e:
            logger.error("anthropic_timeout", model=self.model, error=str(e))
            raise LLMTimeoutError(f"Anthropic request timed out: {e}") from e
        except RateLimitError as e:
            logger.error("anthropic_quota_exceeded", model=self.model, error=str(e))
            raise LLMQuotaExceededError(f"Anthropic quota exceeded: {e}") from e
        except (
            APIConnectionError,
            AuthenticationError,
            PermissionDeniedError,
            InternalServerError,
        ) as e:
            logger.error("anthropic_unavailable", model=self.model, error=str(e))
            raise LLMUnavailableError(f"Anthropic unavailable: {e}") from e
        except APIStatusError as e:
            logger.error("anthropic_request_failed", model=self.model, status_code=e.status_code)
            raise LLMProviderError(f"Anthropic request failed: {e}") from e

        if not response.content:
            logger.error("anthropic_empty_content", model=self.model)
            raise LLMInvalidResponseError("Anthropic returned no content")

        texts: list[str] = []
        tool_calls: list[ToolCall] = []
        for block in response.content:
            if block.type == "text":
                texts.append(block.text)
            elif block.type == "tool_use":
                tool_calls.append(
                    ToolCall(id=block.id, name=block.name, arguments=json.dumps(block.input))
                )

        tokens_prompt = response.usage.input_tokens
        tokens_completion = response.usage.output_tokens
        model = response.model or self.model

        logger.info(
            "anthropic_generation_success",
            model=model,
            tool_calls=len(tool_calls),
            tokens_prompt=tokens_prompt,
            tokens_completion=tokens_completion,
            cost_usd=pricing_calculator.calculate_cost(model, tokens_prompt, tokens_completion),
            latency_ms=int((time.perf_counter() - start_time) * 1000),
        )

        return LLMResponse(
            content="".join(texts),
            tool_calls=tool_calls,
            tokens_used=tokens_prompt + tokens_completion,
            model=model,
            finish_reason=str(response.stop_reason or ""),
        )

    async def health_check(self) -> None:
        """Send a minimal prompt to verify connectivity."""
        try:
            await self._probe()
        except LLMProviderError as e:
            raise LLMUnavailableError(f"Anthropic health check failed: {e}") from e
