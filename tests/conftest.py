"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from agentic_rag.llm.base_provider import LLMClient
from agentic_rag.models.document import Document
from agentic_rag.repositories.base_repository import DocumentStore
from agentic_rag.repositories.document_repository import SQLDocumentRepository


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Return path to temporary test database."""
    return tmp_path / "test.db"


@pytest.fixture
def database_url(temp_db_path: Path) -> str:
    """Return async SQLite URL for the temporary database."""
    return f"sqlite+aiosqlite:///{temp_db_path}"


@pytest.fixture
async def repository(database_url: str) -> AsyncGenerator[SQLDocumentRepository, None]:
    """Create a SQL document repository with its table created."""
    repo = SQLDocumentRepository.from_url(database_url)
    await repo.setup()

    yield repo

    await repo.close()


@pytest.fixture
def mock_document_store() -> MagicMock:
    """Create mock DocumentStore."""
    store = MagicMock(spec=DocumentStore)
    store.search = AsyncMock(return_value=[])
    store.insert = AsyncMock(side_effect=lambda document: document)
    store.health_check = AsyncMock(return_value=None)
    store.count = AsyncMock(return_value=0)
    return store


@pytest.fixture
def mock_llm_client() -> MagicMock:
    """Create mock LLMClient."""
    client = MagicMock(spec=LLMClient)
    client.generate_response = AsyncMock()
    client.health_check = AsyncMock(return_value=None)
    client.get_model = MagicMock(return_value="gpt-4-turbo-preview")
    return client


@pytest.fixture
def sample_documents() -> list[Document]:
    """Create sample documents about Go performance."""
    return [
        Document(
            id="doc-1",
            title="Optimizing Go Routines",
            content="Goroutines are lightweight, channels and wait groups help manage them.",
            link="/docs/go-optimizing",
            category="performance",
        ),
        Document(
            id="doc-2",
            title="Memory Management in Go",
            content="Escape analysis and GC pressure tips for Go programs.",
            link="/docs/go-memory",
            category="performance",
        ),
    ]
