"""Error taxonomy for the Bible content API."""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Classified outcome of a failed API request."""

    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    SERVER_ERROR = "SERVER_ERROR"
    OFFLINE = "OFFLINE"
    TIMEOUT = "TIMEOUT"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


MESSAGES = {
    ErrorCode.RATE_LIMIT_EXCEEDED: "Rate limit exceeded. Please wait a moment before trying again.",
    ErrorCode.UNAUTHORIZED: "Bible service is temporarily unavailable.",
    ErrorCode.FORBIDDEN: "Access denied. Check your API permissions.",
    ErrorCode.SERVER_ERROR: "Bible API service is temporarily unavailable.",
    ErrorCode.OFFLINE: "You're currently offline.",
    ErrorCode.TIMEOUT: (
        "Request timed out after 15 seconds. "
        "Please check your internet connection and try again."
    ),
    ErrorCode.UNKNOWN_ERROR: "An unexpected error occurred.",
}

LIMITER_DENIED_MESSAGE = "Rate limit exceeded. Please wait before making another request."
NO_CACHED_PASSAGE_MESSAGE = (
    "You are offline and no cached data is available for this passage."
)

# Errors for which bundled static data is served instead of surfacing the failure
STATIC_FALLBACK_CODES = frozenset({
    ErrorCode.UNAUTHORIZED,
    ErrorCode.FORBIDDEN,
    ErrorCode.SERVER_ERROR,
})


class BibleAPIError(Exception):
    """Base exception for Bible content API errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        status: Optional[int] = None,
        details: Any = None,
    ):
        self.code = code
        self.message = message or MESSAGES[code]
        self.status = status
        self.details = details
        super().__init__(self.message)

    @property
    def falls_back_to_static(self) -> bool:
        """True when bundled static data should be served instead."""
        return self.code in STATIC_FALLBACK_CODES

    @property
    def retryable(self) -> bool:
        return self.code == ErrorCode.RATE_LIMIT_EXCEEDED

    def __repr__(self) -> str:
        return f"BibleAPIError(code={self.code.value}, status={self.status}, message={self.message!r})"


def classify_status(status: int) -> ErrorCode:
    """Map an HTTP status code to an ErrorCode."""
    if status == 429:
        return ErrorCode.RATE_LIMIT_EXCEEDED
    if status == 401:
        return ErrorCode.UNAUTHORIZED
    if status == 403:
        return ErrorCode.FORBIDDEN
    if status >= 500:
        return ErrorCode.SERVER_ERROR
    return ErrorCode.UNKNOWN_ERROR


def error_from_status(status: int, body: Any = None) -> BibleAPIError:
    """Build a classified error for a non-2xx response."""
    code = classify_status(status)
    if code == ErrorCode.UNKNOWN_ERROR:
        return BibleAPIError(code, f"HTTP error: {status}", status=status, details=body)
    return BibleAPIError(code, status=status, details=body)
