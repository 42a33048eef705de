"""Custom exceptions for the Jira query assistant."""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status

from jira_query_assistant.entities.constants import ERROR_BODY_LIMIT


class CustomException(Exception):
    """Base custom exception class.

    Attributes:
        message: The error message
        status_code: HTTP status code
        headers: Optional HTTP headers
    """

    def __init__(
        self,
        message: Dict[str, Any],
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers: Optional[Dict[str, str]] = None
    ) -> None:
        """Initialize the custom exception.

        Args:
            message: The error message as a dictionary
            status_code: HTTP status code
            headers: Optional HTTP headers
        """
        self.message = message
        self.status_code = status_code
        self.headers = headers
        super().__init__(self.message)


class EmptyQueryError(CustomException):
    """Synthesis produced no usable query."""

    def __init__(self, detail: str = "empty jql") -> None:
        super().__init__({"error": detail}, status_code=status.HTTP_400_BAD_REQUEST)


class SprintScopeError(CustomException):
    """A sprint-scoped request selected more than one project."""

    def __init__(self, projects) -> None:
        super().__init__(
            {
                "error": "sprint-scoped queries require a single project",
                "projects": list(projects),
            },
            status_code=status.HTTP_400_BAD_REQUEST,
        )


def truncate_body(body: Any, limit: int = ERROR_BODY_LIMIT) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    text = str(body)
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class ExternalServiceError(CustomException):
    """Transport, 4xx or 5xx failure reported by the issue tracker."""

    def __init__(
        self,
        reason: str,
        upstream_status: Optional[int] = None,
        body: Any = None,
        jql: Optional[str] = None,
    ) -> None:
        self.reason = reason
        self.upstream_status = upstream_status
        self.body = truncate_body(body)
        self.jql = jql
        error = reason if not self.body else f"{reason}: {self.body}"
        message: Dict[str, Any] = {"error": error, "upstream_status": upstream_status}
        if jql:
            message["jql"] = jql
        super().__init__(message, status_code=status.HTTP_502_BAD_GATEWAY)

    def with_jql(self, jql: str) -> "ExternalServiceError":
        return ExternalServiceError(self.reason, self.upstream_status, self.body, jql)


class AggregationError(CustomException):
    """The paginated search behind worklog summation failed."""

    def __init__(self, detail: str) -> None:
        super().__init__({"error": detail}, status_code=status.HTTP_502_BAD_GATEWAY)


class AssistantNotConfiguredError(CustomException):
    def __init__(self) -> None:
        super().__init__(
            {"error": "LLM not configured"},
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
        )


class HistoryEntryNotFoundError(CustomException):
    def __init__(self, entry_id: str) -> None:
        super().__init__(
            {"error": f"history entry '{entry_id}' not found"},
            status_code=status.HTTP_404_NOT_FOUND,
        )


class InvalidCommandError(CustomException):
    def __init__(self, detail: str) -> None:
        super().__init__({"error": detail}, status_code=status.HTTP_400_BAD_REQUEST)


class MetadataFetchError(CustomException):
    """Some reference data could not be fetched or stored."""

    def __init__(self, summary_path: str, failed: List[str]) -> None:
        self.summary_path = summary_path
        self.failed = failed
        super().__init__(
            {"error": f"some fetches failed, see {summary_path}", "failed": failed},
            status_code=status.HTTP_502_BAD_GATEWAY,
        )


class CustomHTTPException(HTTPException):
    """HTTP exception with custom message and headers.

    Attributes:
        message: The error message
        status_code: HTTP status code
        headers: Optional HTTP headers
    """

    def __init__(
        self,
        status_code: int,
        message: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None
    ) -> None:
        """Initialize the HTTP exception.

        Args:
            status_code: HTTP status code
            message: The error message as a dictionary
            headers: Optional HTTP headers
        """
        self.message = message
        super().__init__(status_code=status_code, detail=message)
        self.headers = headers

    @classmethod
    def from_custom_exception(cls, exc: CustomException) -> "CustomHTTPException":
        return cls(status_code=exc.status_code, message=exc.message, headers=exc.headers)

    def to_json(self) -> Dict[str, str]:
        """Convert headers to JSON format.

        Returns:
            Headers dictionary
        """
        return self.headers if self.headers else {}
