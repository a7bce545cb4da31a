"""LLM module: client interface, tool schema and provider clients."""

from agentic_rag.llm.base_provider import (
    ConversationMessage,
    LLMClient,
    LLMResponse,
    MessageRole,
    Tool,
    ToolCall,
)
from agentic_rag.llm.pricing import PricingCalculator, pricing_calculator
from agentic_rag.llm.tools import SEARCH_TOOL_NAME, create_search_tool, parse_tool_arguments

__all__ = [
    "ConversationMessage",
    "LLMClient",
    "LLMResponse",
    "MessageRole",
    "PricingCalculator",
    "pricing_calculator",
    "SEARCH_TOOL_NAME",
    "Tool",
    "ToolCall",
    "create_search_tool",
    "parse_tool_arguments",
]
