"""Document store interface and implementations."""

from agentic_rag.repositories.base_repository import DocumentStore
from agentic_rag.repositories.document_repository import SQLDocumentRepository

__all__ = ["DocumentStore", "SQLDocumentRepository"]
