"""Tests for structured logging configuration."""

import json
import logging

import pytest
import structlog

from agentic_rag.utils.logger import configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore structlog defaults after each test."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


def test_configure_logging_default_level() -> None:
    """Test logging configuration with default INFO level."""
    configure_logging()

    assert logging.getLogger().level == logging.INFO
    logger = get_logger("test")
    assert hasattr(logger, "info")
    assert hasattr(logger, "error")


def test_configure_logging_custom_level() -> None:
    """Test logging configuration with custom DEBUG level."""
    configure_logging("DEBUG")

    assert logging.getLogger().level == logging.DEBUG


def test_configure_logging_unknown_level_falls_back_to_info() -> None:
    """Test an unknown level name falls back to INFO."""
    configure_logging("CHATTY")

    assert logging.getLogger().level == logging.INFO


def test_transport_loggers_silenced() -> None:
    """Test HTTP and SQL engine loggers stay at WARNING or above."""
    configure_logging("DEBUG")

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_json_output_includes_context(capsys: pytest.CaptureFixture[str]) -> None:
    """Test JSON logs carry the level, event and bound context variables."""
    configure_logging("INFO", "json")
    logger = get_logger("agentic_rag.test")

    with structlog.contextvars.bound_contextvars(query_id="q-123"):
        logger.info("query_started", query_length=12)

    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "query_started"
    assert record["level"] == "INFO"
    assert record["query_id"] == "q-123"
    assert record["query_length"] == 12
    assert record["logger"] == "agentic_rag.test"


def test_console_output(capsys: pytest.CaptureFixture[str]) -> None:
    """Test console format renders human-readable lines."""
    configure_logging("INFO", "console")
    get_logger("agentic_rag.test").warning("documents_purged", deleted=3)

    output = capsys.readouterr().err
    assert "documents_purged" in output
    assert "deleted=3" in output
