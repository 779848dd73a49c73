"""
Error taxonomy for the query pipeline.

Every failure aborts the whole request. The API layer logs ``str(error)``
together with ``details`` and returns ``user_message`` to the client.
"""
from typing import Any, Dict, Optional


class SessionAnalyzerError(Exception):
    """Base class for all pipeline errors."""

    user_message = "An error occurred while processing your query"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": type(self).__name__,
            "message": str(self),
            "details": self.details,
        }


class NotInitializedError(SessionAnalyzerError):
    """A component was used before its one-time setup."""

    user_message = "The service is still starting up, please retry shortly"

    def __init__(self, component: str):
        self.component = component
        super().__init__(f"{component} not initialized", {"component": component})


class OracleUnavailableError(SessionAnalyzerError):
    """The language model could not be reached or rejected the request."""

    user_message = "The language model is currently unavailable"


class DataStoreError(SessionAnalyzerError):
    """A single data store call failed."""

    user_message = "The database could not process the request"


class TranslationError(SessionAnalyzerError):
    """The language model did not produce a usable aggregation pipeline."""

    user_message = "Could not translate your question into a database query"


class QueryExecutionError(SessionAnalyzerError):
    """Every permitted execution attempt failed."""

    user_message = "The database query failed, please try rephrasing your question"

    def __init__(self, attempts: int, last_error: str):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Database query failed after {attempts} attempts: {last_error}",
            {"attempts": attempts, "last_error": last_error},
        )


class QueryRepairError(SessionAnalyzerError):
    """The repair call for a failed pipeline did not succeed."""

    user_message = "The database query failed and could not be corrected"

    def __init__(self, reason: str, attempt: int, execution_error: str):
        self.attempt = attempt
        self.execution_error = execution_error
        super().__init__(
            f"Query could not be fixed: {reason}",
            {"attempt": attempt, "execution_error": execution_error},
        )


class AnalysisError(SessionAnalyzerError):
    """Narration of the results failed or came back empty."""

    user_message = "Results were found but could not be analyzed"
