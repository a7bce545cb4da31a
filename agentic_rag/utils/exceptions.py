"""Custom exception hierarchy for the application."""


class AgenticRAGError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, is_retryable: bool = False) -> None:
        """Initialize exception.

        Args:
            message: Error message
            is_retryable: Whether the operation can be retried
        """
        super().__init__(message)
        self.message = message
        self.is_retryable = is_retryable


class ConfigurationError(AgenticRAGError):
    """Configuration or environment setup error."""

    pass


class ValidationError(AgenticRAGError):
    """Input validation error tagged with the offending field."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"field '{self.field}': {self.message}"
        return self.message


class QueryEmptyError(ValidationError):
    """Query text is empty."""

    def __init__(self, message: str = "query must not be empty") -> None:
        super().__init__(message, field="query")


class QueryTooShortError(ValidationError):
    """Query text is below the minimum length."""

    def __init__(self, message: str = "query is too short") -> None:
        super().__init__(message, field="query")


class QueryTooLongError(ValidationError):
    """Query text exceeds the maximum length."""

    def __init__(self, message: str = "query is too long") -> None:
        super().__init__(message, field="query")


class DocumentInvalidError(ValidationError):
    """Document failed validation."""

    def __init__(self, message: str = "invalid document", field: str | None = None) -> None:
        super().__init__(message, field=field)


class DocumentNotFoundError(AgenticRAGError):
    """Requested document does not exist."""

    pass


class DocumentExistsError(AgenticRAGError):
    """Document with the same identifier already exists."""

    pass


class DatabaseError(AgenticRAGError):
    """Database operation error."""

    pass


class RepositoryUnavailableError(DatabaseError):
    """Document store cannot be reached."""

    pass


class RepositoryTimeoutError(DatabaseError):
    """Document store did not answer before the deadline."""

    def __init__(self, message: str = "document store timed out") -> None:
        super().__init__(message, is_retryable=True)


class RetrievalError(AgenticRAGError):
    """Document retrieval error."""

    pass


class LLMProviderError(AgenticRAGError):
    """LLM provider API error."""

    pass


class LLMUnavailableError(LLMProviderError):
    """LLM provider cannot be reached or rejected the request."""

    pass


class LLMTimeoutError(LLMProviderError):
    """LLM provider did not answer before the deadline."""

    def __init__(self, message: str = "language model timed out") -> None:
        super().__init__(message, is_retryable=True)


class LLMQuotaExceededError(LLMProviderError):
    """LLM provider quota or rate limit exceeded."""

    pass


class LLMInvalidResponseError(LLMProviderError):
    """LLM provider returned a response that cannot be used."""

    pass


class ToolArgumentsError(LLMProviderError):
    """Tool call arguments could not be decoded."""

    pass


class ServiceUnavailableError(AgenticRAGError):
    """Generic service unavailability."""

    def __init__(self, message: str = "service unavailable") -> None:
        super().__init__(message, is_retryable=True)


class QueryProcessingError(AgenticRAGError):
    """Query pipeline aborted because a collaborator failed.

    The collaborator error is kept as ``__cause__``.
    """

    def __init__(self, message: str, stage: str, is_retryable: bool = False) -> None:
        super().__init__(message, is_retryable=is_retryable)
        self.stage = stage


class HealthCheckError(AgenticRAGError):
    """A collaborator failed its health check."""

    def __init__(self, message: str, component: str) -> None:
        super().__init__(message)
        self.component = component


TEMPORARY_ERRORS: tuple[type[BaseException], ...] = (
    RepositoryTimeoutError,
    LLMTimeoutError,
    ServiceUnavailableError,
)


def _error_chain(error: BaseException | None) -> list[BaseException]:
    """Return the error followed by its causes, outermost first."""
    chain: list[BaseException] = []
    while error is not None and error not in chain:
        chain.append(error)
        error = error.__cause__ or error.__context__
    return chain


def is_temporary_error(error: BaseException | None) -> bool:
    """Check whether an error (or any of its causes) is worth retrying.

    Covers repository timeouts, LLM timeouts and generic service
    unavailability. Retrying is left to the caller.
    """
    return any(isinstance(e, TEMPORARY_ERRORS) for e in _error_chain(error))


def is_validation_error(error: BaseException | None) -> bool:
    """Check whether an error (or any of its causes) is a validation error."""
    return any(isinstance(e, ValidationError) for e in _error_chain(error))


def is_not_found_error(error: BaseException | None) -> bool:
    """Check whether an error (or any of its causes) is a missing document."""
    return any(isinstance(e, DocumentNotFoundError) for e in _error_chain(error))
