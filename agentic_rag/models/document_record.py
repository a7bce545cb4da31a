"""DocumentRecord ORM model backing the SQL document store."""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agentic_rag.models.base import Base
from agentic_rag.models.document import Document


def generate_document_id() -> str:
    """Generate a new random document identifier."""
    return str(uuid.uuid4())


class DocumentRecord(Base):
    """Persisted form of a Document.

    Attributes:
        id: UUID string assigned on insert
        title: Document title
        content: Document body text
        link: Link or path to the original document
        category: Category label (indexed for category listing)
        metadata_json: String key/value metadata
        created_at: Timestamp when the document was created (indexed)
        updated_at: Timestamp when the document was last updated
    """

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_document_id)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    category: Mapped[str] = mapped_column(String(100), index=True, nullable=False, default="")

    metadata_json: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        index=True,
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    @classmethod
    def from_document(cls, document: Document) -> "DocumentRecord":
        """Build a record from a domain document.

        The document must already carry its id and timestamps.
        """
        return cls(
            id=document.id,
            title=document.title,
            content=document.content,
            link=document.link,
            category=document.category,
            metadata_json=dict(document.metadata),
            created_at=document.created_at,
            updated_at=document.updated_at,
        )

    def apply(self, document: Document) -> None:
        """Copy mutable fields from a domain document onto this record."""
        self.title = document.title
        self.content = document.content
        self.link = document.link
        self.category = document.category
        self.metadata_json = dict(document.metadata)
        if document.updated_at is not None:
            self.updated_at = document.updated_at

    def to_document(self) -> Document:
        """Convert this record into a domain document."""
        return Document(
            id=self.id,
            title=self.title,
            content=self.content,
            link=self.link,
            category=self.category,
            metadata={str(k): str(v) for k, v in (self.metadata_json or {}).items()},
            created_at=_as_utc(self.created_at),
            updated_at=_as_utc(self.updated_at),
        )

    def __repr__(self) -> str:
        """String representation showing id and title."""
        return f"<DocumentRecord(id={self.id}, title='{self.title}')>"


def _as_utc(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo; treat naive timestamps as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
