"""CLI command for adding a single document."""

import asyncio
import sys

import click
import structlog

from agentic_rag.cli.utils import load_config, open_orchestrator, parse_metadata
from agentic_rag.models.document import Document
from agentic_rag.utils.config import Config
from agentic_rag.utils.exceptions import ValidationError

logger = structlog.get_logger(__name__)


async def _execute_add(config: Config, document: Document) -> Document:
    async with open_orchestrator(config) as orchestrator:
        return await orchestrator.add_document(document)


@click.command("add-document")
@click.option("--title", required=True, help="Document title (max 200 characters)")
@click.option("--content", required=True, help="Document content (max 10000 characters)")
@click.option("--link", default="", help="Link or path to the document")
@click.option("--category", default="", help="Category label")
@click.option("--meta", "meta", multiple=True, help="Metadata entry as key=value (repeatable)")
def add_document(
    title: str, content: str, link: str, category: str, meta: tuple[str, ...]
) -> None:
    """Validate and store one document.

    Examples:
        agentic-rag add-document --title "Go Channels" --content "..." --category concurrency
    """
    metadata = parse_metadata(meta)
    config = load_config()

    document = Document.create(title=title, content=content, link=link, category=category)
    for key, value in metadata.items():
        document.add_metadata(key, value)

    try:
        stored = asyncio.run(_execute_add(config, document))
    except ValidationError as e:
        click.echo(f"Invalid document: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.error("add_document_failed", error=str(e), exc_info=True)
        click.echo(f"Failed to add document: {e}", err=True)
        sys.exit(1)

    click.echo(f"Document added: {stored.id}")
    click.echo(f"  Title: {stored.title}")
    if stored.category:
        click.echo(f"  Category: {stored.category}")
