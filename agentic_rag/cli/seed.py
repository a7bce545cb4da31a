"""CLI command for seeding the document store with sample documents."""

import asyncio
import json
import sys
from pathlib import Path

import click
import structlog
from pydantic import TypeAdapter
from tqdm import tqdm

from agentic_rag.cli.utils import load_config, open_repository
from agentic_rag.models.document import Document
from agentic_rag.repositories.base_repository import DocumentStore
from agentic_rag.utils.config import Config

logger = structlog.get_logger(__name__)

# Sample documents about Go performance
SAMPLE_DOCUMENTS: list[dict[str, str]] = [
    {
        "title": "Optimizing Go Routines",
        "content": (
            "Goroutines are lightweight and efficient, but they must be managed "
            "carefully. This guide covers best practices for goroutine optimization, "
            "including proper use of channels, wait groups and context."
        ),
        "link": "/docs/go-optimizing",
        "category": "performance",
    },
    {
        "title": "Memory Management in Go",
        "content": (
            "Go's garbage collector is sophisticated, but understanding how it works "
            "is crucial for optimization. Learn about memory allocation, escape "
            "analysis and tips to reduce GC pressure."
        ),
        "link": "/docs/go-memory",
        "category": "performance",
    },
    {
        "title": "Profiling Go Applications",
        "content": (
            "Profiling tools are essential for finding bottlenecks. This document "
            "explores pprof, trace and other built-in Go tools for performance "
            "analysis."
        ),
        "link": "/docs/go-profiling",
        "category": "performance",
    },
    {
        "title": "Database Performance in Go",
        "content": (
            "Optimize your database queries in Go. Learn about connection pooling, "
            "prepared statements and how to structure queries for maximum efficiency."
        ),
        "link": "/docs/go-db-performance",
        "category": "performance",
    },
    {
        "title": "Network Performance Tuning",
        "content": (
            "Maximize network performance in Go applications. Includes tips on TCP "
            "tuning, HTTP/2 and implementing client-side caching effectively."
        ),
        "link": "/docs/go-network",
        "category": "performance",
    },
]

_documents_adapter = TypeAdapter(list[Document])


def sample_documents() -> list[Document]:
    """Build fresh Document objects for the built-in samples."""
    return [Document.create(**fields) for fields in SAMPLE_DOCUMENTS]


def load_documents(path: Path) -> list[Document]:
    """Load documents from a JSON file holding a list of document objects.

    Raises:
        click.ClickException: If the file cannot be read or parsed
    """
    try:
        documents = _documents_adapter.validate_json(path.read_bytes())
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Cannot load documents from {path}: {e}") from e

    for document in documents:
        # Ids are always assigned by the store
        document.id = None
    return documents


async def seed_documents(
    store: DocumentStore, documents: list[Document], keep_existing: bool = False
) -> tuple[int, int]:
    """Insert documents, optionally clearing the store first.

    Individual insert failures are logged and skipped.

    Returns:
        Tuple of (inserted, failed) counts
    """
    if not keep_existing:
        cleared = await store.delete_all()
        click.echo(f"Cleared {cleared:,} existing documents")

    inserted = 0
    failed = 0
    for document in tqdm(documents, desc="Seeding", unit="doc"):
        try:
            await store.insert(document)
        except Exception as e:
            failed += 1
            logger.error("seed_document_failed", title=document.title, error=str(e))
            tqdm.write(f"  Failed to insert '{document.title}': {e}")
            continue
        inserted += 1

    logger.info("seed_completed", inserted=inserted, failed=failed)
    return inserted, failed


async def _execute_seed(
    config: Config, documents: list[Document], keep_existing: bool
) -> tuple[int, int]:
    async with open_repository(config) as repository:
        return await seed_documents(repository, documents, keep_existing)


@click.command()
@click.option(
    "--file",
    "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with a list of documents (default: built-in Go performance samples)",
)
@click.option(
    "--keep-existing",
    is_flag=True,
    default=False,
    help="Do not clear the collection before inserting",
)
def seed(file_path: Path | None, keep_existing: bool) -> None:
    """Populate the document store with sample documents.

    Examples:
        agentic-rag seed

        agentic-rag seed --file data/documents.json --keep-existing
    """
    click.echo("=" * 80)
    click.echo("Agentic RAG - Seed Documents")
    click.echo("=" * 80)
    click.echo()

    config = load_config()
    documents = load_documents(file_path) if file_path else sample_documents()

    try:
        inserted, failed = asyncio.run(_execute_seed(config, documents, keep_existing))
    except KeyboardInterrupt:
        click.echo("\nSeed cancelled by user", err=True)
        sys.exit(1)
    except Exception as e:
        logger.error("seed_failed", error=str(e), exc_info=True)
        click.echo(f"Seed failed: {e}", err=True)
        sys.exit(1)

    click.echo()
    click.echo("=" * 80)
    click.echo("Seed Complete!")
    click.echo("=" * 80)
    click.echo(f"  Inserted: {inserted:,}")
    click.echo(f"  Failed: {failed:,}")
    click.echo()
