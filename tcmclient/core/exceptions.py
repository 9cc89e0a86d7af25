"""
Typed errors for test-management API calls.

Every failure surfaced by the dispatcher or the upload orchestrator is a
TCMError carrying a closed ErrorKind, a display-ready message and, for
HTTP-level failures, the status code.
"""
from enum import Enum
from typing import Optional, Dict, Any


class ErrorKind(str, Enum):
    """Closed set of failure kinds."""
    UNAUTHORIZED = 'unauthorized'
    HTTP_ERROR = 'http_error'
    TIMEOUT = 'timeout'
    ABORTED = 'aborted'
    NETWORK = 'network'


class TCMError(Exception):
    """Base exception for all test-management API errors."""

    kind: ErrorKind = ErrorKind.NETWORK

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message, formatted for direct display
            status_code: HTTP status code (if a response was received)
        """
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            'message': self.message,
            'kind': self.kind.value,
            'status_code': self.status_code,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code})"


class UnauthorizedError(TCMError):
    """Raised on HTTP 401. Stored credentials must be cleared by the caller."""

    kind = ErrorKind.UNAUTHORIZED
    MESSAGE = 'Authentication failed, please log in again'

    def __init__(self, message: str = MESSAGE, status_code: Optional[int] = 401) -> None:
        super().__init__(message, status_code)


class HTTPStatusError(TCMError):
    """Raised for any other non-success HTTP status."""

    kind = ErrorKind.HTTP_ERROR

    @classmethod
    def from_response(cls, status_code: int, data: Any) -> 'HTTPStatusError':
        """Build the error from a response status and its parsed body."""
        message = None
        if isinstance(data, dict):
            message = data.get('error')
        return cls(message or f"HTTP {status_code}", status_code)


class RequestTimeoutError(TCMError):
    """Raised when a request did not settle before its deadline."""

    kind = ErrorKind.TIMEOUT

    @classmethod
    def for_upload(cls, timeout_ms: int) -> 'RequestTimeoutError':
        """Timeout error for a bulk upload attempt."""
        return cls(
            f"Upload timed out after {timeout_ms / 1000:g} seconds; "
            f"check your network or reduce the number of test cases"
        )


class AbortedError(TCMError):
    """Raised when an in-flight transport call was cancelled."""

    kind = ErrorKind.ABORTED

    def __init__(self, message: str = 'Request was aborted', status_code: Optional[int] = None) -> None:
        super().__init__(message, status_code)


class NetworkError(TCMError):
    """Raised when the transport could not complete the call."""

    kind = ErrorKind.NETWORK
