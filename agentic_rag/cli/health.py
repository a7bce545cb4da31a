"""CLI command for checking the document store and the LLM."""

import asyncio
import sys

import click
import structlog

from agentic_rag.cli.utils import load_config, open_orchestrator
from agentic_rag.utils.config import Config
from agentic_rag.utils.exceptions import HealthCheckError

logger = structlog.get_logger(__name__)


async def _execute_health(config: Config) -> int:
    """Run the orchestrator health check and return the document count."""
    async with open_orchestrator(config) as orchestrator:
        await orchestrator.health_check()
        return await orchestrator.document_store.count()


@click.command()
def health() -> None:
    """Check that the document store and the LLM are reachable."""
    click.echo("=" * 80)
    click.echo("Agentic RAG - Health Check")
    click.echo("=" * 80)
    click.echo()

    config = load_config()

    try:
        document_count = asyncio.run(_execute_health(config))
    except HealthCheckError as e:
        llm_status = "FAILED" if e.component == "llm_client" else "NOT CHECKED"
        store_status = "FAILED" if e.component == "document_store" else "OK"
        click.echo(f"  Document store: {store_status}")
        click.echo(f"  LLM ({config.llm_model}): {llm_status}")
        click.echo(f"  Error: {e}")
        click.echo()
        sys.exit(1)
    except Exception as e:
        logger.error("health_check_failed", error=str(e), exc_info=True)
        click.echo(f"Health check failed: {e}", err=True)
        sys.exit(1)

    click.echo("  Document store: OK")
    click.echo(f"  LLM ({config.llm_model}): OK")
    click.echo(f"  Documents: {document_count:,}")
    click.echo()
