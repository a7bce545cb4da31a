"""Unit tests for seed and health CLI commands."""

import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from click.testing import CliRunner

from agentic_rag.cli.health import health
from agentic_rag.cli.seed import SAMPLE_DOCUMENTS, load_documents, seed, seed_documents
from agentic_rag.models.document import Document
from agentic_rag.repositories.document_repository import SQLDocumentRepository
from agentic_rag.utils.exceptions import DatabaseError, HealthCheckError


def make_config(database_url: str = "sqlite+aiosqlite:///:memory:") -> MagicMock:
    """Create a configuration stand-in for CLI commands."""
    config = MagicMock()
    config.database_url = database_url
    config.llm_model = "gpt-4-turbo-preview"
    return config


async def count_documents(database_url: str) -> int:
    repository = SQLDocumentRepository.from_url(database_url)
    try:
        return await repository.count()
    finally:
        await repository.close()


class TestSeedCLI:
    """Test seed CLI command."""

    def test_seed_inserts_samples(self, database_url: str) -> None:
        """Test seeding inserts the five sample documents."""
        with patch("agentic_rag.cli.seed.load_config", return_value=make_config(database_url)):
            result = CliRunner().invoke(seed, [])

        assert result.exit_code == 0, result.output
        assert "Inserted: 5" in result.output
        assert asyncio.run(count_documents(database_url)) == len(SAMPLE_DOCUMENTS)

    def test_seed_clears_unless_keep_existing(self, database_url: str) -> None:
        """Test reseeding replaces documents, --keep-existing appends."""
        runner = CliRunner()
        with patch("agentic_rag.cli.seed.load_config", return_value=make_config(database_url)):
            runner.invoke(seed, [])
            runner.invoke(seed, [])
            assert asyncio.run(count_documents(database_url)) == 5

            result = runner.invoke(seed, ["--keep-existing"])

        assert result.exit_code == 0, result.output
        assert asyncio.run(count_documents(database_url)) == 10

    def test_seed_from_file(self, database_url: str, tmp_path: Path) -> None:
        """Test documents can be loaded from a JSON file."""
        source = tmp_path / "documents.json"
        source.write_text(
            json.dumps([{"id": "ignored", "title": "Custom", "content": "Custom content"}])
        )

        with patch("agentic_rag.cli.seed.load_config", return_value=make_config(database_url)):
            result = CliRunner().invoke(seed, ["--file", str(source)])

        assert result.exit_code == 0, result.output
        assert "Inserted: 1" in result.output

    def test_load_documents_resets_ids(self, tmp_path: Path) -> None:
        """Test ids from the file are dropped."""
        source = tmp_path / "documents.json"
        source.write_text(json.dumps([{"id": "x", "title": "T", "content": "C"}]))

        documents = load_documents(source)

        assert documents[0].id is None
        assert documents[0].title == "T"

    async def test_seed_documents_skips_failures(self) -> None:
        """Test individual insert failures are counted and skipped."""
        store = MagicMock()
        store.delete_all = AsyncMock(return_value=2)
        store.insert = AsyncMock(side_effect=[DatabaseError("boom"), None, None])
        documents = [Document(title=f"Doc {i}", content="Content") for i in range(3)]

        inserted, failed = await seed_documents(store, documents)

        assert (inserted, failed) == (2, 1)
        store.delete_all.assert_awaited_once()
        assert store.insert.await_count == 3

    async def test_seed_documents_keep_existing(self) -> None:
        """Test keep_existing skips clearing the store."""
        store = MagicMock()
        store.delete_all = AsyncMock()
        store.insert = AsyncMock()

        await seed_documents(store, [Document(title="T", content="C")], keep_existing=True)

        store.delete_all.assert_not_called()


def wired(orchestrator: MagicMock):
    """Build a replacement for open_orchestrator yielding the mock."""

    @asynccontextmanager
    async def open_orchestrator(config) -> AsyncIterator[MagicMock]:
        yield orchestrator

    return open_orchestrator


class TestHealthCLI:
    """Test health CLI command."""

    def test_health_ok(self) -> None:
        """Test a healthy system prints OK and the document count."""
        orchestrator = MagicMock()
        orchestrator.health_check = AsyncMock()
        orchestrator.document_store.count = AsyncMock(return_value=5)

        with (
            patch("agentic_rag.cli.health.load_config", return_value=make_config()),
            patch("agentic_rag.cli.health.open_orchestrator", new=wired(orchestrator)),
        ):
            result = CliRunner().invoke(health, [])

        assert result.exit_code == 0, result.output
        assert "Document store: OK" in result.output
        assert "Documents: 5" in result.output

    def test_health_store_failure(self) -> None:
        """Test a store failure exits 1 and skips the LLM status."""
        orchestrator = MagicMock()
        orchestrator.health_check = AsyncMock(
            side_effect=HealthCheckError("store down", component="document_store")
        )

        with (
            patch("agentic_rag.cli.health.load_config", return_value=make_config()),
            patch("agentic_rag.cli.health.open_orchestrator", new=wired(orchestrator)),
        ):
            result = CliRunner().invoke(health, [])

        assert result.exit_code == 1
        assert "Document store: FAILED" in result.output
        assert "NOT CHECKED" in result.output

    def test_health_llm_failure(self) -> None:
        """Test an LLM failure exits 1."""
        orchestrator = MagicMock()
        orchestrator.health_check = AsyncMock(
            side_effect=HealthCheckError("llm down", component="llm_client")
        )

        with (
            patch("agentic_rag.cli.health.load_config", return_value=make_config()),
            patch("agentic_rag.cli.health.open_orchestrator", new=wired(orchestrator)),
        ):
            result = CliRunner().invoke(health, [])

        assert result.exit_code == 1
        assert "Document store: OK" in result.output
        assert "(gpt-4-turbo-preview): FAILED" in result.output
