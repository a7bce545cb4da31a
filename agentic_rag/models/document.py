"""Document domain model shared by the store, the orchestrator and the LLM."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Document(BaseModel):
    """A searchable document.

    The identifier is assigned by the document store on insert; documents
    are otherwise only changed through explicit updates.

    Attributes:
        id: Store-assigned identifier (None until inserted)
        title: Document title
        content: Document body text
        link: Link or path to the original document
        category: Free-form category label
        metadata: Arbitrary string key/value pairs
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: str | None = None
    title: str
    content: str
    link: str = ""
    category: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        title: str,
        content: str,
        link: str = "",
        category: str = "",
    ) -> "Document":
        """Create a new document with both timestamps set to now."""
        now = _utcnow()
        return cls(
            title=title,
            content=content,
            link=link,
            category=category,
            created_at=now,
            updated_at=now,
        )

    def update_content(self, content: str) -> None:
        """Replace the content and bump the update timestamp."""
        self.content = content
        self.updated_at = _utcnow()

    def add_metadata(self, key: str, value: str) -> None:
        """Set a metadata entry and bump the update timestamp."""
        self.metadata[key] = value
        self.updated_at = _utcnow()
