"""Domain and ORM models for the application."""

from agentic_rag.models.base import Base
from agentic_rag.models.document import Document
from agentic_rag.models.document_record import DocumentRecord

__all__ = ["Base", "Document", "DocumentRecord"]
