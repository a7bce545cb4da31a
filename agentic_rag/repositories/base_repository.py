"""Abstract document store interface consumed by the query orchestrator."""

from abc import ABC, abstractmethod

from agentic_rag.models.document import Document


class DocumentStore(ABC):
    """Abstract base class for document stores.

    Implementations must be safe for concurrent use by many in-flight
    queries (e.g. pooled connections, one session per call).
    """

    @abstractmethod
    async def search(self, query: str, limit: int) -> list[Document]:
        """Search documents relevant to a text query.

        Args:
            query: Free-text query
            limit: Maximum number of documents to return

        Returns:
            Documents ordered by relevance, most relevant first

        Raises:
            QueryEmptyError: If the query is blank
            DatabaseError: If the store fails
        """
        pass

    @abstractmethod
    async def insert(self, document: Document) -> Document:
        """Persist a new document, assigning its id and timestamps.

        Args:
            document: Document to insert (updated in place)

        Returns:
            The same document with id and timestamps populated

        Raises:
            DocumentInvalidError: If document is None
            DocumentExistsError: If the id is already taken
            DatabaseError: If the store fails
        """
        pass

    @abstractmethod
    async def health_check(self) -> None:
        """Verify the store is reachable.

        Raises:
            DatabaseError: If the store is unavailable
        """
        pass

    @abstractmethod
    async def find_by_id(self, document_id: str) -> Document:
        """Fetch one document.

        Raises:
            DocumentNotFoundError: If no document has this id
        """
        pass

    @abstractmethod
    async def find_by_category(self, category: str, limit: int) -> list[Document]:
        """List documents of a category, newest first."""
        pass

    @abstractmethod
    async def update(self, document: Document) -> Document:
        """Update an existing document and bump its update timestamp.

        Raises:
            DocumentInvalidError: If the document has no id
            DocumentNotFoundError: If the id is unknown
        """
        pass

    @abstractmethod
    async def delete(self, document_id: str) -> None:
        """Delete one document.

        Raises:
            DocumentNotFoundError: If no document has this id
        """
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every document and return how many were removed."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Return the total number of documents."""
        pass

    @abstractmethod
    async def setup(self) -> None:
        """Create the tables and indexes the store needs."""
        pass
