"""SQL-backed document store using SQLAlchemy async sessions."""

import re
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

import structlog
from sqlalchemy import delete, func, or_, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from agentic_rag.models.base import Base
from agentic_rag.models.document import Document
from agentic_rag.models.document_record import DocumentRecord, generate_document_id
from agentic_rag.repositories.base_repository import DocumentStore
from agentic_rag.utils.exceptions import (
    DatabaseError,
    DocumentExistsError,
    DocumentInvalidError,
    DocumentNotFoundError,
    QueryEmptyError,
    RepositoryUnavailableError,
)

logger = structlog.get_logger(__name__)

# Title matches count double relative to content matches
TITLE_WEIGHT = 2
CONTENT_WEIGHT = 1

_TERM_PATTERN = re.compile(r"\w+")
_EPOCH = datetime.min.replace(tzinfo=UTC)


def tokenize(query: str) -> list[str]:
    """Split a query into unique lowercase search terms, preserving order."""
    return list(dict.fromkeys(_TERM_PATTERN.findall(query.lower())))


def score_document(document: Document, terms: list[str]) -> int:
    """Score a document by weighted term occurrences in title and content."""
    title = document.title.lower()
    content = document.content.lower()
    return sum(
        TITLE_WEIGHT * title.count(term) + CONTENT_WEIGHT * content.count(term) for term in terms
    )


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Map SQLAlchemy failures onto the application exception hierarchy."""
    try:
        yield
    except OperationalError as e:
        logger.error("document_store_unavailable", operation=operation, error=str(e))
        raise RepositoryUnavailableError(f"document store unavailable during {operation}") from e
    except SQLAlchemyError as e:
        logger.error("document_store_failed", operation=operation, error=str(e))
        raise DatabaseError(f"document store {operation} failed: {e}") from e


class SQLDocumentRepository(DocumentStore):
    """Document store on top of a SQLAlchemy async engine.

    Each operation opens its own session from a shared pooled engine, so one
    repository instance can serve concurrent queries.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        """Initialize the repository.

        Args:
            engine: SQLAlchemy async engine
        """
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )

    @classmethod
    def from_url(cls, database_url: str) -> "SQLDocumentRepository":
        """Create a repository from a database URL.

        For file-based SQLite URLs the parent directory is created if missing.
        """
        url = make_url(database_url)
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        engine = create_async_engine(database_url, echo=False)
        logger.info("document_repository_initialized", backend=url.get_backend_name())
        return cls(engine)

    async def setup(self) -> None:
        """Create the documents table and its indexes."""
        with _translate_errors("setup"):
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("document_store_setup_completed")

    async def search(self, query: str, limit: int) -> list[Document]:
        """Search documents by keyword relevance.

        Candidates are rows whose title or content contains any query term;
        they are ranked by weighted term occurrences, newest first on ties.
        """
        if not query or not query.strip():
            raise QueryEmptyError()

        terms = tokenize(query)
        if not terms or limit <= 0:
            return []

        conditions = []
        for term in terms:
            conditions.append(DocumentRecord.title.icontains(term, autoescape=True))
            conditions.append(DocumentRecord.content.icontains(term, autoescape=True))

        stmt = select(DocumentRecord).where(or_(*conditions))

        with _translate_errors("search"):
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                candidates = [record.to_document() for record in result.scalars().all()]

        ranked = sorted(
            candidates,
            key=lambda doc: (score_document(doc, terms), doc.created_at or _EPOCH),
            reverse=True,
        )

        logger.debug(
            "document_search_completed",
            terms=terms,
            candidates=len(candidates),
            returned=min(limit, len(ranked)),
        )
        return ranked[:limit]

    async def find_by_id(self, document_id: str) -> Document:
        """Fetch one document by id."""
        with _translate_errors("find_by_id"):
            async with self.session_factory() as session:
                record = await session.get(DocumentRecord, document_id)

        if record is None:
            raise DocumentNotFoundError(f"document not found: {document_id}")
        return record.to_document()

    async def find_by_category(self, category: str, limit: int) -> list[Document]:
        """List documents of one category, newest first."""
        stmt = (
            select(DocumentRecord)
            .where(DocumentRecord.category == category)
            .order_by(DocumentRecord.created_at.desc())
            .limit(limit)
        )
        with _translate_errors("find_by_category"):
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return [record.to_document() for record in result.scalars().all()]

    async def insert(self, document: Document) -> Document:
        """Insert a document, assigning its id and any missing timestamps.

        The caller's document receives the id and timestamps only once the
        insert is committed.
        """
        if document is None:
            raise DocumentInvalidError("document must not be None", field="document")

        now = datetime.now(UTC)
        stored = document.model_copy(
            update={
                "id": document.id or generate_document_id(),
                "created_at": document.created_at or now,
                "updated_at": document.updated_at or now,
            }
        )

        try:
            with _translate_errors("insert"):
                async with self.session_factory() as session:
                    session.add(DocumentRecord.from_document(stored))
                    await session.commit()
        except DatabaseError as e:
            if isinstance(e.__cause__, IntegrityError):
                raise DocumentExistsError(f"document already exists: {stored.id}") from e
            raise

        document.id = stored.id
        document.created_at = stored.created_at
        document.updated_at = stored.updated_at

        logger.debug("document_inserted", document_id=document.id, title=document.title)
        return document

    async def update(self, document: Document) -> Document:
        """Update an existing document and bump its update timestamp."""
        if document is None or not document.id:
            raise DocumentInvalidError("document id is required for update", field="id")

        with _translate_errors("update"):
            async with self.session_factory() as session:
                record = await session.get(DocumentRecord, document.id)
                if record is None:
                    raise DocumentNotFoundError(f"document not found: {document.id}")

                document.updated_at = datetime.now(UTC)
                record.apply(document)
                await session.commit()

        return document

    async def delete(self, document_id: str) -> None:
        """Delete one document by id."""
        with _translate_errors("delete"):
            async with self.session_factory() as session:
                record = await session.get(DocumentRecord, document_id)
                if record is None:
                    raise DocumentNotFoundError(f"document not found: {document_id}")

                await session.delete(record)
                await session.commit()

    async def delete_all(self) -> int:
        """Delete every document."""
        with _translate_errors("delete_all"):
            async with self.session_factory() as session:
                result = await session.execute(delete(DocumentRecord))
                await session.commit()

        deleted = result.rowcount or 0
        logger.warning("documents_purged", deleted=deleted)
        return deleted

    async def count(self) -> int:
        """Count all documents."""
        stmt = select(func.count()).select_from(DocumentRecord)
        with _translate_errors("count"):
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return result.scalar() or 0

    async def health_check(self) -> None:
        """Run a trivial query against the database."""
        with _translate_errors("health_check"):
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

    async def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        await self.engine.dispose()
