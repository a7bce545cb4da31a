"""Cost estimation for LLM calls."""

import structlog

logger = structlog.get_logger(__name__)


class PricingCalculator:
    """Estimate USD cost of LLM calls.

    Prices are per 1K tokens and keyed by model family prefix, so dated
    snapshots returned by providers (e.g. "gpt-4-turbo-2024-04-09") resolve
    to their family. Longest matching prefix wins.
    """

    PRICING: dict[str, dict[str, float]] = {
        # OpenAI
        "gpt-4-turbo": {"input": 0.01, "output": 0.03},
        "gpt-4-0125-preview": {"input": 0.01, "output": 0.03},
        "gpt-4o-mini": {"input": 0.00015, "output": 0.0006},
        "gpt-4o": {"input": 0.0025, "output": 0.01},
        "gpt-4.1-mini": {"input": 0.0004, "output": 0.0016},
        "gpt-4.1": {"input": 0.002, "output": 0.008},
        "gpt-3.5-turbo": {"input": 0.0005, "output": 0.0015},
        # Anthropic
        "claude-sonnet-4-5": {"input": 0.003, "output": 0.015},
        "claude-haiku-4-5": {"input": 0.0008, "output": 0.004},
        "claude-opus-4-5": {"input": 0.015, "output": 0.075},
    }

    def get_model_pricing(self, model: str) -> dict[str, float] | None:
        """Get pricing for a model, or None if the model family is unknown."""
        matches = [prefix for prefix in self.PRICING if model.startswith(prefix)]
        if not matches:
            return None
        return self.PRICING[max(matches, key=len)]

    def calculate_cost(self, model: str, prompt_tokens: int, completion_tokens: int = 0) -> float:
        """Calculate cost for a generation request.

        Args:
            model: Model identifier
            prompt_tokens: Number of input tokens
            completion_tokens: Number of output tokens

        Returns:
            Estimated cost in USD (0.0 for unknown models)
        """
        pricing = self.get_model_pricing(model)
        if pricing is None:
            logger.debug("cost_unknown_model", model=model)
            return 0.0

        input_cost = (prompt_tokens / 1000) * pricing["input"]
        output_cost = (completion_tokens / 1000) * pricing["output"]
        total_cost = input_cost + output_cost

        logger.debug(
            "cost_calculated",
            model=model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_cost_usd=round(total_cost, 6),
        )

        return total_cost


# Singleton instance for convenience
pricing_calculator = PricingCalculator()
