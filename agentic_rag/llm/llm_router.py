"""Provider selection by model name."""

import structlog

from agentic_rag.llm.base_provider import LLMClient
from agentic_rag.llm.providers.anthropic_provider import AnthropicClient
from agentic_rag.llm.providers.openai_provider import OpenAIClient
from agentic_rag.utils.config import Config
from agentic_rag.utils.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

# Model-to-provider mapping:
# - claude-* → Anthropic
# - gpt-*, o1*, o3*, o4* → OpenAI
ANTHROPIC_PREFIXES = ("claude-",)
OPENAI_PREFIXES = ("gpt-", "o1", "o3", "o4")


def get_provider_name(model: str) -> str:
    """Auto-detect provider from model name.

    Raises:
        ConfigurationError: If model prefix is not recognized
    """
    if model.startswith(ANTHROPIC_PREFIXES):
        return "anthropic"
    if model.startswith(OPENAI_PREFIXES):
        return "openai"
    raise ConfigurationError(
        f"Unknown model: {model}. Model name must start with 'claude-' or 'gpt-'"
    )


def create_llm_client(config: Config) -> LLMClient:
    """Build the LLM client matching the configured model.

    Raises:
        ConfigurationError: If the model is unknown or its API key is missing
    """
    provider = get_provider_name(config.llm_model)

    client: LLMClient
    if provider == "anthropic":
        client = AnthropicClient(
            api_key=config.require_api_key("ANTHROPIC_API_KEY"),
            model=config.llm_model,
            max_retries=config.llm_max_retries,
        )
    else:
        client = OpenAIClient(
            api_key=config.require_api_key("OPENAI_API_KEY"),
            model=config.llm_model,
            max_retries=config.llm_max_retries,
        )

    logger.info("llm_client_selected", provider=provider, model=config.llm_model)
    return client
