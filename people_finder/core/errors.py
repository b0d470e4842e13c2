"""
Application errors for clean API and assistant error handling.

Use ServiceUnavailableError (and its generation subclasses) when a dependency
such as the text generator is misconfigured or unreachable, so the API can
return 503 and the assistant can fall back to a user-facing message.
"""


class ServiceUnavailableError(Exception):
    """Raised when a required service (e.g. the text generator) is unavailable or misconfigured."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class GenerationUnavailableError(ServiceUnavailableError):
    """No generation backend is configured, or the backend refused the request."""


class GenerationTimeoutError(ServiceUnavailableError):
    """The generation backend did not answer within the configured timeout."""


class EmptyCorpusError(Exception):
    """Raised when a query is run against an engine holding no records."""

    def __init__(self, message: str = "No records have been loaded.") -> None:
        self.message = message
        super().__init__(message)


class EmptyQueryError(Exception):
    """Raised when the query is blank or whitespace-only."""

    def __init__(self, message: str = "Query is empty.") -> None:
        self.message = message
        super().__init__(message)


class PerRecordAnalysisError(Exception):
    """Scoring or formatting failed for a single record; only that record is skipped."""

    def __init__(self, record_name: str, reason: str) -> None:
        self.record_name = record_name
        self.reason = reason
        super().__init__(f"Analysis failed for {record_name!r}: {reason}")
