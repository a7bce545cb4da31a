"""LLM client implementations."""

from agentic_rag.llm.providers.anthropic_provider import AnthropicClient
from agentic_rag.llm.providers.openai_provider import OpenAIClient

__all__ = ["AnthropicClient", "OpenAIClient"]
