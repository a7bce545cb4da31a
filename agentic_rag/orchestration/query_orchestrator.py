"""Query orchestrator running the tool-calling retrieval loop."""

import asyncio
import time
import uuid
from dataclasses import dataclass, field

import structlog
from pydantic import TypeAdapter

from agentic_rag.llm.base_provider import (
    ConversationMessage,
    LLMClient,
    LLMResponse,
    Tool,
    ToolCall,
)
from agentic_rag.llm.tools import SEARCH_TOOL_NAME, create_search_tool, parse_search_arguments
from agentic_rag.models.document import Document
from agentic_rag.repositories.base_repository import DocumentStore
from agentic_rag.utils.exceptions import (
    AgenticRAGError,
    DatabaseError,
    DocumentInvalidError,
    HealthCheckError,
    LLMTimeoutError,
    QueryEmptyError,
    QueryProcessingError,
    QueryTooLongError,
    QueryTooShortError,
    RepositoryTimeoutError,
    RetrievalError,
    ToolArgumentsError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


# Request limits
MIN_QUERY_LENGTH = 3
MAX_QUERY_LENGTH = 1000
MAX_TITLE_LENGTH = 200
MAX_CONTENT_LENGTH = 10000

# Configuration defaults
DEFAULT_MAX_SEARCH_RESULTS = 5
DEFAULT_SEARCH_TIMEOUT_SECONDS = 10.0
DEFAULT_LLM_TIMEOUT_SECONDS = 30.0

_documents_adapter = TypeAdapter(list[Document])


@dataclass
class OrchestratorConfig:
    """Settings for the query orchestrator.

    Attributes:
        max_search_results: Results per search when the request gives none
        search_timeout: Seconds allowed for one document search
        llm_timeout: Seconds allowed for one LLM round
    """

    max_search_results: int = DEFAULT_MAX_SEARCH_RESULTS
    search_timeout: float = DEFAULT_SEARCH_TIMEOUT_SECONDS
    llm_timeout: float = DEFAULT_LLM_TIMEOUT_SECONDS


@dataclass
class QueryRequest:
    """Request object for query processing.

    Attributes:
        query: The user's question (3 to 1000 characters)
        user_id: Optional user identifier for logging
        session_id: Optional session identifier for logging
        max_results: Maximum documents per search (<= 0 means configured default)
        category: Optional category label, echoed for callers
        metadata: Free-form string metadata
    """

    query: str
    user_id: str | None = None
    session_id: str | None = None
    max_results: int = 0
    category: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class QueryResponse:
    """Response object from query processing.

    Attributes:
        answer: Final answer text
        sources: Documents retrieved for the answer (empty if no search ran)
        query: The original query text
        processing_time_ms: Wall-clock processing time in milliseconds
        search_performed: Whether the model requested a search
        model: Model that produced the final answer
        tokens_used: Tokens billed for the final LLM call
    """

    answer: str
    sources: list[Document]
    query: str
    processing_time_ms: int
    search_performed: bool
    model: str
    tokens_used: int


def serialize_documents(documents: list[Document]) -> str:
    """Serialize documents to the JSON handed back to the model.

    Returns "[]" if serialization fails.
    """
    try:
        return _documents_adapter.dump_json(documents).decode()
    except Exception as e:
        logger.error("documents_serialization_failed", error=str(e))
        return "[]"


class QueryOrchestrator:
    """Central orchestrator for the agentic RAG pipeline.

    Lets the model decide whether to call the ``search_metadata`` tool,
    runs the requested searches, then asks the model for a final answer
    grounded in the results. Holds no per-query state, so one instance can
    serve concurrent queries.

    Attributes:
        document_store: Store used for retrieval and ingestion
        llm_client: Client used for both LLM rounds
        config: Orchestrator settings
    """

    def __init__(
        self,
        document_store: DocumentStore,
        llm_client: LLMClient,
        config: OrchestratorConfig | None = None,
    ) -> None:
        """Initialize QueryOrchestrator with its collaborators.

        Args:
            document_store: DocumentStore implementation
            llm_client: LLMClient implementation
            config: Orchestrator settings (defaults if omitted)
        """
        self.document_store = document_store
        self.llm_client = llm_client
        self.config = config or OrchestratorConfig()

        logger.info(
            "query_orchestrator_initialized",
            max_search_results=self.config.max_search_results,
            search_timeout_seconds=self.config.search_timeout,
            llm_timeout_seconds=self.config.llm_timeout,
        )

    async def process_query(self, request: QueryRequest) -> QueryResponse:
        """Answer a query, letting the model decide whether to search.

        Args:
            request: QueryRequest; ``max_results`` is filled in place when <= 0

        Returns:
            QueryResponse with answer, sources and timing

        Raises:
            ValidationError: If the request is invalid (before any external call)
            QueryProcessingError: If either LLM round fails
        """
        start_time = time.perf_counter()
        self._validate_request(request)

        with structlog.contextvars.bound_contextvars(query_id=str(uuid.uuid4())):
            logger.info(
                "query_started",
                user_id=request.user_id,
                session_id=request.session_id,
                query_length=len(request.query),
                max_results=request.max_results,
            )

            messages = [ConversationMessage.user(request.query)]
            tools = [create_search_tool()]

            llm_response = await self._generate(messages, tools, stage="initial_generation")

            sources: list[Document] = []
            search_performed = False

            if llm_response.tool_calls:
                search_performed = True
                answered_calls: list[ToolCall] = []
                tool_messages: list[ConversationMessage] = []

                for tool_call in llm_response.tool_calls:
                    if tool_call.name != SEARCH_TOOL_NAME:
                        logger.warning("unknown_tool_call_ignored", tool_name=tool_call.name)
                        continue

                    try:
                        arguments = parse_search_arguments(tool_call.arguments)
                    except ToolArgumentsError as e:
                        logger.error(
                            "tool_call_skipped", tool_call_id=tool_call.id, error=str(e)
                        )
                        continue

                    results = await self._run_search(arguments.query, request.max_results)
                    # Last processed tool call wins; results are not accumulated
                    sources = results

                    answered_calls.append(tool_call)
                    tool_messages.append(
                        ConversationMessage.tool(
                            serialize_documents(results),
                            tool_name=tool_call.name,
                            tool_call_id=tool_call.id,
                        )
                    )

                # Skipped calls are not replayed; providers reject calls without results
                messages.append(ConversationMessage.assistant(llm_response.content, answered_calls))
                messages.extend(tool_messages)

                llm_response = await self._generate(messages, None, stage="final_generation")

            processing_time_ms = int((time.perf_counter() - start_time) * 1000)

            response = QueryResponse(
                answer=llm_response.content,
                sources=sources,
                query=request.query,
                processing_time_ms=processing_time_ms,
                search_performed=search_performed,
                model=llm_response.model,
                tokens_used=llm_response.tokens_used,
            )

            logger.info(
                "query_completed",
                sources_count=len(sources),
                search_performed=search_performed,
                processing_time_ms=processing_time_ms,
                tokens_used=llm_response.tokens_used,
            )

            return response

    async def search_documents(self, query: str, limit: int) -> list[Document]:
        """Search the document store under the search timeout.

        Args:
            query: Search text
            limit: Maximum results (<= 0 means configured default)

        Returns:
            Matching documents, most relevant first

        Raises:
            QueryEmptyError: If the query is empty
            RepositoryTimeoutError: If the search exceeds the search timeout
            RetrievalError: If the store fails
        """
        if not query:
            raise QueryEmptyError()

        if limit <= 0:
            limit = self.config.max_search_results

        try:
            async with asyncio.timeout(self.config.search_timeout):
                documents = await self.document_store.search(query, limit)
        except TimeoutError as e:
            logger.error(
                "document_search_timeout",
                search_query=query,
                timeout_seconds=self.config.search_timeout,
            )
            raise RepositoryTimeoutError(
                f"document search exceeded {self.config.search_timeout}s"
            ) from e
        except (ValidationError, RepositoryTimeoutError):
            raise
        except Exception as e:
            logger.error("document_search_failed", search_query=query, limit=limit, error=str(e))
            retryable = isinstance(e, AgenticRAGError) and e.is_retryable
            raise RetrievalError(f"document search failed: {e}", retryable) from e

        logger.debug("document_search_succeeded", search_query=query, results=len(documents))
        return documents

    async def add_document(self, document: Document) -> Document:
        """Validate and store a new document.

        Args:
            document: Document to add; id and timestamps are set by the store

        Returns:
            The stored document

        Raises:
            DocumentInvalidError: If validation fails (the store is not called)
            DatabaseError: If the store fails
        """
        if document is None:
            raise DocumentInvalidError("document must not be None", field="document")

        self._validate_document(document)

        try:
            stored = await self.document_store.insert(document)
        except Exception as e:
            logger.error("document_insert_failed", title=document.title, error=str(e))
            retryable = isinstance(e, AgenticRAGError) and e.is_retryable
            raise DatabaseError(f"failed to add document: {e}", retryable) from e

        logger.info(
            "document_added",
            document_id=stored.id,
            title=stored.title,
            category=stored.category,
        )
        return stored

    async def health_check(self) -> None:
        """Check the document store, then the LLM client.

        Raises:
            HealthCheckError: For the first collaborator that fails
        """
        try:
            await self.document_store.health_check()
        except Exception as e:
            logger.error("health_check_failed", component="document_store", error=str(e))
            raise HealthCheckError(
                f"document store unavailable: {e}", component="document_store"
            ) from e

        try:
            await self.llm_client.health_check()
        except Exception as e:
            logger.error("health_check_failed", component="llm_client", error=str(e))
            raise HealthCheckError(f"LLM client unavailable: {e}", component="llm_client") from e

        logger.debug("health_check_passed")

    async def _generate(
        self,
        messages: list[ConversationMessage],
        tools: list[Tool] | None,
        stage: str,
    ) -> LLMResponse:
        """Run one LLM round under the LLM timeout.

        Raises:
            QueryProcessingError: Wrapping the client failure
        """
        step_start = time.perf_counter()
        try:
            try:
                async with asyncio.timeout(self.config.llm_timeout):
                    response = await self.llm_client.generate_response(messages, tools)
            except TimeoutError as e:
                logger.error("llm_timeout", stage=stage, timeout_seconds=self.config.llm_timeout)
                raise LLMTimeoutError(
                    f"no response within {self.config.llm_timeout}s"
                ) from e
        except Exception as e:
            logger.error("llm_call_failed", stage=stage, error=str(e), error_type=type(e).__name__)
            retryable = isinstance(e, AgenticRAGError) and e.is_retryable
            raise QueryProcessingError(
                f"{stage} failed: {e}", stage=stage, is_retryable=retryable
            ) from e

        logger.info(
            "llm_round_completed",
            stage=stage,
            tool_calls=len(response.tool_calls),
            tokens_used=response.tokens_used,
            latency_ms=int((time.perf_counter() - step_start) * 1000),
        )
        return response

    async def _run_search(self, query: str, limit: int) -> list[Document]:
        """Search for a tool call; failures degrade to no results."""
        logger.info("search_started", search_query=query, limit=limit)
        try:
            return await self.search_documents(query, limit)
        except Exception as e:
            logger.error("search_failed", search_query=query, error=str(e), exc_info=True)
            return []

    def _validate_request(self, request: QueryRequest) -> None:
        """Validate a query request, filling the default result limit in place."""
        if request is None:
            raise ValidationError("request must not be None", field="request")

        if request.query == "":
            raise QueryEmptyError()

        if len(request.query) < MIN_QUERY_LENGTH:
            raise QueryTooShortError(
                f"query must be at least {MIN_QUERY_LENGTH} characters"
            )

        if len(request.query) > MAX_QUERY_LENGTH:
            raise QueryTooLongError(f"query must be at most {MAX_QUERY_LENGTH} characters")

        if request.max_results <= 0:
            request.max_results = self.config.max_search_results

    def _validate_document(self, document: Document) -> None:
        """Validate title and content of a document before insertion."""
        if not document.title:
            raise DocumentInvalidError("title is required", field="title")

        if not document.content:
            raise DocumentInvalidError("content is required", field="content")

        if len(document.title) > MAX_TITLE_LENGTH:
            raise DocumentInvalidError(
                f"title is too long (maximum {MAX_TITLE_LENGTH} characters)", field="title"
            )

        if len(document.content) > MAX_CONTENT_LENGTH:
            raise DocumentInvalidError(
                f"content is too long (maximum {MAX_CONTENT_LENGTH} characters)",
                field="content",
            )
