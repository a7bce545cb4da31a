"""Main entry point for the agentic RAG command line."""

from agentic_rag.cli.main import cli

if __name__ == "__main__":
    cli(prog_name="agentic-rag")
