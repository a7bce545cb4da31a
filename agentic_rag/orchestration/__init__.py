"""Query orchestration for the agentic RAG pipeline."""

from agentic_rag.orchestration.query_orchestrator import (
    OrchestratorConfig,
    QueryOrchestrator,
    QueryRequest,
    QueryResponse,
)

__all__ = ["OrchestratorConfig", "QueryOrchestrator", "QueryRequest", "QueryResponse"]
