"""Shared utilities for CLI commands."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import click

from agentic_rag.llm.llm_router import create_llm_client
from agentic_rag.orchestration.query_orchestrator import QueryOrchestrator
from agentic_rag.repositories.document_repository import SQLDocumentRepository
from agentic_rag.utils.config import Config
from agentic_rag.utils.logger import configure_logging

# Display constants
PREVIEW_LENGTH = 200


def load_config() -> Config:
    """Load configuration and configure logging from it.

    Raises:
        click.ClickException: If configuration is invalid
    """
    try:
        config = Config()
    except Exception as e:
        raise click.ClickException(f"Configuration error: {e}") from e

    configure_logging(config.log_level, config.log_format)
    return config


@asynccontextmanager
async def open_repository(config: Config) -> AsyncIterator[SQLDocumentRepository]:
    """Open the document repository, creating tables if needed, and close it on exit."""
    repository = SQLDocumentRepository.from_url(config.database_url)
    try:
        await repository.setup()
        yield repository
    finally:
        await repository.close()


@asynccontextmanager
async def open_orchestrator(config: Config) -> AsyncIterator[QueryOrchestrator]:
    """Build a QueryOrchestrator wired to the configured store and LLM."""
    llm_client = create_llm_client(config)
    async with open_repository(config) as repository:
        yield QueryOrchestrator(repository, llm_client, config.orchestrator_config())


def parse_metadata(pairs: tuple[str, ...]) -> dict[str, str]:
    """Parse ``key=value`` pairs into a metadata dict.

    Raises:
        click.BadParameter: If a pair has no ``=`` or an empty key
    """
    metadata: dict[str, str] = {}
    for pair in pairs:
        key, separator, value = pair.partition("=")
        if not separator or not key.strip():
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--meta")
        metadata[key.strip()] = value.strip()
    return metadata


def preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    """Truncate text for display."""
    return text[:length] + "..." if len(text) > length else text
