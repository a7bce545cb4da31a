"""Base LLM client interface and the data classes exchanged with it."""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MessageRole(str, Enum):
    """Roles a transcript message can take."""

    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass
class Tool:
    """A tool the model may call.

    Args:
        name: Tool name the model refers to
        description: Free-text description shown to the model
        parameters: JSON schema of the tool arguments
    """

    name: str
    description: str
    parameters: dict[str, Any]


@dataclass
class ToolCall:
    """A tool invocation requested by the model.

    Args:
        id: Provider-assigned call identifier
        name: Name of the tool to run
        arguments: JSON-encoded arguments
    """

    id: str
    name: str
    arguments: str


@dataclass
class ConversationMessage:
    """One message of the model-visible transcript.

    Tool-result messages carry both ``tool_name`` and ``tool_call_id``;
    assistant messages may carry the ``tool_calls`` they issued.
    """

    role: MessageRole
    content: str
    tool_name: str | None = None
    tool_call_id: str | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    timestamp: int = field(default_factory=lambda: int(time.time()))

    def __post_init__(self) -> None:
        self.role = MessageRole(self.role)
        if (self.tool_name is None) != (self.tool_call_id is None):
            raise ValueError("tool_name and tool_call_id must be set together")

    @classmethod
    def user(cls, content: str) -> "ConversationMessage":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(
        cls, content: str, tool_calls: list[ToolCall] | None = None
    ) -> "ConversationMessage":
        return cls(role=MessageRole.ASSISTANT, content=content, tool_calls=list(tool_calls or []))

    @classmethod
    def tool(cls, content: str, tool_name: str, tool_call_id: str) -> "ConversationMessage":
        return cls(
            role=MessageRole.TOOL,
            content=content,
            tool_name=tool_name,
            tool_call_id=tool_call_id,
        )


def answered_tool_call_ids(messages: list[ConversationMessage]) -> set[str]:
    """Collect the ids of tool calls that have a tool-result message."""
    return {
        message.tool_call_id
        for message in messages
        if message.role is MessageRole.TOOL and message.tool_call_id
    }


@dataclass
class LLMResponse:
    """Response from one LLM round-trip.

    Args:
        content: Generated text (may be empty when tools are called)
        tool_calls: Tool calls requested by the model
        tokens_used: Total tokens billed for the call
        model: Model that produced the response
        finish_reason: Provider finish/stop reason
    """

    content: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    tokens_used: int = 0
    model: str = ""
    finish_reason: str = ""


class LLMClient(ABC):
    """Abstract base class for LLM clients.

    Implementations must be safe to share between concurrent queries.
    """

    @abstractmethod
    async def generate_response(
        self,
        messages: list[ConversationMessage],
        tools: list[Tool] | None = None,
    ) -> LLMResponse:
        """Generate the next assistant turn for a transcript.

        Args:
            messages: Transcript so far, oldest first
            tools: Tools the model may call; None or empty disables tool use

        Returns:
            LLMResponse with content and any tool calls

        Raises:
            LLMUnavailableError: If the provider cannot be reached
            LLMTimeoutError: If the provider times out
            LLMQuotaExceededError: If quota or rate limits are exceeded
            LLMInvalidResponseError: If the provider returns no usable choice
        """
        pass

    @abstractmethod
    def get_model(self) -> str:
        """Get the configured model identifier."""
        pass

    @abstractmethod
    async def health_check(self) -> None:
        """Verify the provider answers a minimal request.

        Raises:
            LLMProviderError: If the probe fails
        """
        pass

    async def _probe(self) -> None:
        """Issue the minimal generation used by health checks."""
        await self.generate_response([ConversationMessage.user("Hello")], tools=None)
