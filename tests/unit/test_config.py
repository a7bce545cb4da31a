"""Tests for configuration management."""

from unittest.mock import patch

import pytest

from agentic_rag.orchestration.query_orchestrator import OrchestratorConfig
from agentic_rag.utils.config import (
    DEFAULT_DATABASE_URL,
    DEFAULT_LLM_MODEL,
    DEFAULT_QUERY,
    Config,
    parse_duration,
)
from agentic_rag.utils.exceptions import ConfigurationError

CONFIG_ENV_VARS = (
    "LLM_MODEL",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "LLM_MAX_RETRIES",
    "DATABASE_URL",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "REQUEST_TIMEOUT",
    "SEARCH_TIMEOUT",
    "LLM_TIMEOUT",
    "SEARCH_LIMIT",
    "DEFAULT_QUERY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove configuration variables from the environment."""
    for key in CONFIG_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


def load_config() -> Config:
    """Create Config without reading a local .env file."""
    with patch("agentic_rag.utils.config.load_dotenv"):
        return Config()


def test_config_defaults() -> None:
    """Test Config falls back to defaults when nothing is set."""
    config = load_config()

    assert config.llm_model == DEFAULT_LLM_MODEL
    assert config.database_url == DEFAULT_DATABASE_URL
    assert config.default_query == DEFAULT_QUERY
    assert config.log_level == "INFO"
    assert config.log_format == "json"
    assert config.request_timeout == 30.0
    assert config.search_timeout == 10.0
    assert config.llm_timeout == 30.0
    assert config.search_limit == 5
    assert config.llm_max_retries == 0
    assert config.openai_api_key == ""


def test_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test Config picks up environment overrides."""
    monkeypatch.setenv("LLM_MODEL", "claude-sonnet-4-5")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test_anthropic_key")
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///test.db")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SEARCH_TIMEOUT", "500ms")
    monkeypatch.setenv("LLM_TIMEOUT", "1m")
    monkeypatch.setenv("SEARCH_LIMIT", "3")

    config = load_config()

    assert config.llm_model == "claude-sonnet-4-5"
    assert config.anthropic_api_key == "test_anthropic_key"
    assert config.database_url == "sqlite+aiosqlite:///test.db"
    assert config.log_level == "DEBUG"
    assert config.search_timeout == 0.5
    assert config.llm_timeout == 60.0
    assert config.search_limit == 3


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("SEARCH_LIMIT", "many"),
        ("SEARCH_LIMIT", "0"),
        ("LLM_MAX_RETRIES", "-1"),
        ("REQUEST_TIMEOUT", "soon"),
        ("LLM_TIMEOUT", "0s"),
    ],
)
def test_config_invalid_values(monkeypatch: pytest.MonkeyPatch, key: str, value: str) -> None:
    """Test invalid values fail fast with ConfigurationError."""
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigurationError, match=key):
        load_config()


def test_require_api_key() -> None:
    """Test require_api_key fails for a missing key."""
    config = load_config()
    config.openai_api_key = "test_openai_key"

    assert config.require_api_key("OPENAI_API_KEY") == "test_openai_key"
    with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY"):
        config.require_api_key("ANTHROPIC_API_KEY")


def test_orchestrator_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test orchestrator settings are derived from configuration."""
    monkeypatch.setenv("SEARCH_LIMIT", "7")
    monkeypatch.setenv("SEARCH_TIMEOUT", "2")

    config = load_config().orchestrator_config()

    assert config == OrchestratorConfig(max_search_results=7, search_timeout=2.0, llm_timeout=30.0)


def test_get_optional(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test get_optional returns the default for unset variables."""
    monkeypatch.setenv("SOME_OPTION", "value")
    assert Config.get_optional("SOME_OPTION") == "value"
    assert Config.get_optional("MISSING_OPTION", "fallback") == "fallback"


def test_settings_read_through_get_optional() -> None:
    """Test every setting is looked up via get_optional."""
    overrides = {"LLM_MODEL": "claude-sonnet-4-5", "SEARCH_LIMIT": "9", "LLM_TIMEOUT": "5s"}

    def lookup(key: str, default: str | None = None) -> str | None:
        return overrides.get(key, default)

    with patch.object(Config, "get_optional", side_effect=lookup) as mock_get:
        config = load_config()

    assert config.llm_model == "claude-sonnet-4-5"
    assert config.search_limit == 9
    assert config.llm_timeout == 5.0
    looked_up = {call.args[0] for call in mock_get.call_args_list}
    assert set(CONFIG_ENV_VARS) <= looked_up


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("10", 10.0),
        ("2.5", 2.5),
        ("500ms", 0.5),
        ("10s", 10.0),
        ("1m30s", 90.0),
        ("1h", 3600.0),
    ],
)
def test_parse_duration(value: str, expected: float) -> None:
    """Test durations in seconds or with unit suffixes."""
    assert parse_duration(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["", "ten", "10x", "s"])
def test_parse_duration_invalid(value: str) -> None:
    """Test malformed durations raise ValueError."""
    with pytest.raises(ValueError):
        parse_duration(value)
