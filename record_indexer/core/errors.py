"""
Errors raised by the indexing flow.

Two kinds reach the caller:
- ServiceError: the search service rejected or failed an operation
  (bad request, auth failure, missing index, connection failure).
- TaskTimeoutError: the completion wait ran out of attempts or time.
"""

from typing import Any, Optional

from opensearchpy.exceptions import ConnectionError as TransportConnectionError
from opensearchpy.exceptions import ConnectionTimeout, TransportError


class ServiceError(Exception):
    """
    Failure reported by (or while talking to) the search service.

    Never retried locally; the original exception is kept as __cause__.
    """

    def __init__(
        self,
        message: str,
        status_code: Any = None,
        error_type: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type

    @classmethod
    def from_transport_error(cls, exc: TransportError, action: str) -> "ServiceError":
        """
        Build a ServiceError from an opensearch-py TransportError.

        Args:
            exc: The transport error raised by the client
            action: Short description of what was attempted, e.g. "index object-1"

        Returns:
            ServiceError carrying the status code and error type
        """
        if isinstance(exc, ConnectionTimeout):
            err = cls(f"{action} failed: connection timed out: {exc.error}", None, "connection_timeout")
        elif isinstance(exc, TransportConnectionError):
            err = cls(f"{action} failed: connection error: {exc.error}", None, "connection_error")
        else:
            # status_code is "N/A" when no HTTP response was received
            status = exc.status_code if isinstance(exc.status_code, int) else None
            error_type = exc.error if isinstance(exc.error, str) else None
            err = cls(f"{action} failed: HTTP {status}: {error_type or exc}", status, error_type)
        err.__cause__ = exc
        return err

    def to_dict(self) -> dict:
        result = {"error": self.message}
        if self.status_code is not None:
            result["status_code"] = self.status_code
        if self.error_type:
            result["error_type"] = self.error_type
        return result


class InvalidRecordError(ServiceError):
    """Record rejected before it was sent (missing or malformed identifier)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400, error_type="invalid_record")


class TaskTimeoutError(TimeoutError):
    """The completion wait gave up before the write became visible."""

    def __init__(self, message: str, attempts: int = 0, handle: Any = None):
        super().__init__(message)
        self.attempts = attempts
        self.handle = handle
