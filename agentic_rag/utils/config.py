"""Configuration management for environment variables."""

import os
import re
from pathlib import Path

from dotenv import load_dotenv

from agentic_rag.orchestration.query_orchestrator import OrchestratorConfig
from agentic_rag.utils.exceptions import ConfigurationError

DEFAULT_LLM_MODEL = "gpt-4-turbo-preview"
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///data/documents.db"
DEFAULT_QUERY = "What are the documents related to Golang performance?"

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: str) -> float:
    """Parse a duration into seconds.

    Accepts plain seconds ("10", "2.5") or suffixed values ("500ms", "10s",
    "1m30s", "1h").

    Raises:
        ValueError: If the value is not a valid duration
    """
    text = value.strip().lower()
    try:
        return float(text)
    except ValueError:
        pass

    if not text or _DURATION_PART.sub("", text):
        raise ValueError(f"invalid duration: {value!r}")

    return sum(
        float(amount) * _DURATION_UNITS[unit] for amount, unit in _DURATION_PART.findall(text)
    )


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Load configuration from .env file and environment.

        Raises:
            ConfigurationError: If a value is missing or invalid
        """
        env_path = Path(".env")
        if env_path.exists():
            load_dotenv(env_path)

        # LLM
        self.llm_model = self.get_optional("LLM_MODEL", DEFAULT_LLM_MODEL)
        self.openai_api_key = self.get_optional("OPENAI_API_KEY", "")
        self.anthropic_api_key = self.get_optional("ANTHROPIC_API_KEY", "")
        self.llm_max_retries = self._get_int("LLM_MAX_RETRIES", 0)

        # Database
        self.database_url = self.get_optional("DATABASE_URL", DEFAULT_DATABASE_URL)

        # Application
        self.log_level = self.get_optional("LOG_LEVEL", "INFO")
        self.log_format = self.get_optional("LOG_FORMAT", "json")
        self.request_timeout = self._get_duration("REQUEST_TIMEOUT", 30.0)
        self.search_timeout = self._get_duration("SEARCH_TIMEOUT", 10.0)
        self.llm_timeout = self._get_duration("LLM_TIMEOUT", 30.0)
        self.search_limit = self._get_int("SEARCH_LIMIT", 5)
        self.default_query = self.get_optional("DEFAULT_QUERY", DEFAULT_QUERY)

        self.validate()

    def validate(self) -> None:
        """Check cross-field constraints.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.database_url:
            raise ConfigurationError("DATABASE_URL must not be empty")
        if self.search_limit <= 0:
            raise ConfigurationError("SEARCH_LIMIT must be greater than zero")
        if self.llm_max_retries < 0:
            raise ConfigurationError("LLM_MAX_RETRIES must not be negative")
        for name in ("request_timeout", "search_timeout", "llm_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name.upper()} must be greater than zero")

    def require_api_key(self, key: str) -> str:
        """Return an API key attribute value, failing if it was not provided.

        Args:
            key: Environment variable name (OPENAI_API_KEY or ANTHROPIC_API_KEY)

        Raises:
            ConfigurationError: If the key is not set
        """
        value = getattr(self, key.lower(), "")
        if not value:
            raise ConfigurationError(f"{key} environment variable is not set")
        return str(value)

    def orchestrator_config(self) -> OrchestratorConfig:
        """Build orchestrator settings from this configuration."""
        return OrchestratorConfig(
            max_search_results=self.search_limit,
            search_timeout=self.search_timeout,
            llm_timeout=self.llm_timeout,
        )

    def _get_int(self, key: str, default: int) -> int:
        raw = self.get_optional(key)
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError as e:
            raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from e

    def _get_duration(self, key: str, default: float) -> float:
        raw = self.get_optional(key)
        if not raw:
            return default
        try:
            return parse_duration(raw)
        except ValueError as e:
            raise ConfigurationError(f"{key} must be a duration, got {raw!r}") from e

    @staticmethod
    def get_optional(key: str, default: str | None = None) -> str | None:
        """Get optional environment variable with default value.

        Args:
            key: Environment variable name
            default: Default value if not set

        Returns:
            Environment variable value or default
        """
        return os.getenv(key, default)
