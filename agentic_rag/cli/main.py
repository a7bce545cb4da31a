"""Click group bundling all agentic RAG commands."""

import click

from agentic_rag import __version__
from agentic_rag.cli.add_document import add_document
from agentic_rag.cli.health import health
from agentic_rag.cli.query import query
from agentic_rag.cli.search import search
from agentic_rag.cli.seed import seed


@click.group()
@click.version_option(__version__, prog_name="agentic-rag")
def cli() -> None:
    """Agentic RAG: let the model decide when to search your documents."""


cli.add_command(query)
cli.add_command(search)
cli.add_command(add_document)
cli.add_command(seed)
cli.add_command(health)


if __name__ == "__main__":
    cli()
