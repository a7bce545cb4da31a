"""CLI command for searching the document store without the LLM."""

import asyncio
import sys
import time

import click
import structlog

from agentic_rag.cli.utils import load_config, open_orchestrator, preview
from agentic_rag.models.document import Document
from agentic_rag.utils.config import Config

logger = structlog.get_logger(__name__)


def _display_results(query_text: str, results: list[Document], latency_ms: float) -> None:
    """Display search results in user-friendly format."""
    click.echo("=" * 80)
    click.echo("DOCUMENT SEARCH RESULTS")
    click.echo("=" * 80)
    click.echo(f"Query: {query_text}")
    click.echo(f"Results: {len(results)} documents")
    click.echo(f"Latency: {latency_ms:.2f}ms")
    click.echo("=" * 80)
    click.echo()

    if not results:
        click.echo("No results found.")
        return

    for i, document in enumerate(results, start=1):
        click.echo(f"[{i}] {document.title}")
        click.echo(f"    ID: {document.id}")
        click.echo(f"    Link: {document.link or '-'}")
        click.echo(f"    Category: {document.category or '-'}")
        click.echo(f"    Preview: {preview(document.content)}")
        click.echo()


async def _execute_search(config: Config, query_text: str, limit: int) -> list[Document]:
    async with open_orchestrator(config) as orchestrator:
        return await orchestrator.search_documents(query_text, limit)


@click.command()
@click.argument("query_text", type=str)
@click.option(
    "--limit",
    "-k",
    type=int,
    default=0,
    help="Number of results to retrieve (default: from SEARCH_LIMIT env var)",
)
def search(query_text: str, limit: int) -> None:
    """Search stored documents by keyword.

    Examples:
        agentic-rag search "goroutines"

        agentic-rag search "memory gc" --limit 3
    """
    config = load_config()
    start_time = time.perf_counter()

    try:
        results = asyncio.run(_execute_search(config, query_text, limit))
    except KeyboardInterrupt:
        click.echo("\nSearch cancelled by user", err=True)
        sys.exit(1)
    except Exception as e:
        logger.error("search_failed", error=str(e), exc_info=True)
        click.echo(f"Search failed: {e}", err=True)
        sys.exit(1)

    latency_ms = (time.perf_counter() - start_time) * 1000
    _display_results(query_text, results, latency_ms)
    logger.info("search_completed", results_count=len(results), latency_ms=round(latency_ms, 2))
