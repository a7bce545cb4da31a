"""Command line interface for the agentic RAG pipeline."""
