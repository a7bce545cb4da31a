"""CLI command for answering a query through the agentic RAG pipeline."""

import asyncio
import sys

import click
import structlog

from agentic_rag.cli.utils import load_config, open_orchestrator, preview
from agentic_rag.orchestration.query_orchestrator import QueryRequest, QueryResponse
from agentic_rag.utils.config import Config
from agentic_rag.utils.exceptions import QueryProcessingError, ValidationError

logger = structlog.get_logger(__name__)


def _display_response(response: QueryResponse, category: str | None) -> None:
    """Display a query response in user-friendly format."""
    click.echo("=" * 80)
    click.echo("AGENTIC RAG ANSWER")
    click.echo("=" * 80)
    click.echo(f"Query: {response.query}")
    if category:
        click.echo(f"Category: {category}")
    click.echo(f"Search performed: {'yes' if response.search_performed else 'no'}")
    click.echo(f"Model: {response.model}")
    click.echo(f"Tokens used: {response.tokens_used:,}")
    click.echo(f"Processing time: {response.processing_time_ms}ms")
    click.echo("=" * 80)
    click.echo()
    click.echo(response.answer)
    click.echo()

    if not response.sources:
        click.echo("No sources.")
        return

    click.echo("-" * 80)
    click.echo(f"Sources ({len(response.sources)})")
    click.echo("-" * 80)
    for i, document in enumerate(response.sources, start=1):
        click.echo(f"[{i}] {document.title}")
        if document.link:
            click.echo(f"    Link: {document.link}")
        if document.category:
            click.echo(f"    Category: {document.category}")
        click.echo(f"    Preview: {preview(document.content)}")
        click.echo()


async def _execute_query(config: Config, request: QueryRequest) -> QueryResponse:
    """Run one query under the request timeout."""
    async with open_orchestrator(config) as orchestrator:
        async with asyncio.timeout(config.request_timeout):
            return await orchestrator.process_query(request)


@click.command()
@click.argument("query_text", type=str, required=False)
@click.option(
    "--max-results",
    "-n",
    type=int,
    default=0,
    help="Maximum documents per search (default: from SEARCH_LIMIT env var)",
)
@click.option("--category", type=str, default=None, help="Category label to attach to the query")
@click.option("--user-id", type=str, default=None, help="User identifier for logging")
def query(
    query_text: str | None, max_results: int, category: str | None, user_id: str | None
) -> None:
    """Answer a question, letting the model search the document store.

    Examples:
        agentic-rag query "What are the documents related to Golang performance?"

        agentic-rag query "How do I profile Go code?" --max-results 3
    """
    config = load_config()

    request = QueryRequest(
        query=query_text if query_text is not None else config.default_query,
        user_id=user_id,
        max_results=max_results,
        category=category,
    )

    try:
        response = asyncio.run(_execute_query(config, request))
    except KeyboardInterrupt:
        click.echo("\nQuery cancelled by user", err=True)
        sys.exit(1)
    except ValidationError as e:
        click.echo(f"Invalid query: {e}", err=True)
        sys.exit(1)
    except QueryProcessingError as e:
        logger.error("query_failed", stage=e.stage, error=str(e))
        click.echo(f"Query failed during {e.stage}: {e}", err=True)
        sys.exit(1)
    except TimeoutError:
        logger.error("query_timeout", timeout_seconds=config.request_timeout)
        click.echo(f"Query timed out after {config.request_timeout}s", err=True)
        sys.exit(1)
    except Exception as e:
        logger.error("query_failed", error=str(e), exc_info=True)
        click.echo(f"Query failed: {e}", err=True)
        sys.exit(1)

    _display_response(response, category)
