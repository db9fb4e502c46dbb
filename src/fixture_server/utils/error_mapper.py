"""Map exceptions to structured errors and HTTP statuses."""

from enum import Enum
from dataclasses import dataclass
from http import HTTPStatus
from typing import Optional

from selenium.common.exceptions import (
    NoSuchElementException,
    NoSuchWindowException,
    SessionNotCreatedException,
    TimeoutException,
    WebDriverException,
)

from ..core.exceptions import (
    BindError,
    ConfigError,
    HandlerError,
    RemoteConnectionError,
    WaitTimeoutError,
)


class ErrorCode(str, Enum):
    """Error codes for fixture serving and harness operations."""

    # Server errors
    CONFIG_ERROR = "CONFIG_ERROR"
    BIND_ERROR = "BIND_ERROR"
    HANDLER_ERROR = "HANDLER_ERROR"
    NOT_FOUND = "NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"

    # Harness errors
    TIMEOUT = "TIMEOUT"
    ELEMENT_NOT_FOUND = "ELEMENT_NOT_FOUND"
    WINDOW_NOT_FOUND = "WINDOW_NOT_FOUND"
    REMOTE_UNAVAILABLE = "REMOTE_UNAVAILABLE"
    CONNECTION_REFUSED = "CONNECTION_REFUSED"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


EXCEPTION_MAP: dict[type[Exception], ErrorCode] = {
    # Domain exceptions
    ConfigError: ErrorCode.CONFIG_ERROR,
    BindError: ErrorCode.BIND_ERROR,
    HandlerError: ErrorCode.HANDLER_ERROR,
    WaitTimeoutError: ErrorCode.TIMEOUT,
    RemoteConnectionError: ErrorCode.REMOTE_UNAVAILABLE,
    # Selenium exceptions
    TimeoutException: ErrorCode.TIMEOUT,
    NoSuchElementException: ErrorCode.ELEMENT_NOT_FOUND,
    NoSuchWindowException: ErrorCode.WINDOW_NOT_FOUND,
    SessionNotCreatedException: ErrorCode.REMOTE_UNAVAILABLE,
}

STATUS_MAP: dict[ErrorCode, HTTPStatus] = {
    ErrorCode.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCode.BAD_REQUEST: HTTPStatus.BAD_REQUEST,
}

SUGGESTIONS: dict[ErrorCode, str] = {
    ErrorCode.CONFIG_ERROR: (
        "Pass at least one route. Paths must start with '/' and handlers must be callable."
    ),
    ErrorCode.BIND_ERROR: (
        "The port is already in use. Stop the other server or pass port=0 "
        "for an ephemeral port."
    ),
    ErrorCode.HANDLER_ERROR: (
        "The route handler raised or returned an unsupported value. "
        "Handlers must return a FixtureResponse, str or bytes."
    ),
    ErrorCode.NOT_FOUND: "No route is registered for this path.",
    ErrorCode.BAD_REQUEST: "The request framing was invalid; send a numeric Content-Length.",
    ErrorCode.TIMEOUT: (
        "The condition was not met in time. Increase the timeout or check "
        "that the page actually produces the expected state."
    ),
    ErrorCode.ELEMENT_NOT_FOUND: "Verify the selector matches an element on the fixture page.",
    ErrorCode.WINDOW_NOT_FOUND: "The browsing context was closed before it could be used.",
    ErrorCode.REMOTE_UNAVAILABLE: (
        "Cannot reach the remote WebDriver endpoint. Check that Appium or the "
        "Selenium Grid is running and the capabilities match an available device."
    ),
    ErrorCode.CONNECTION_REFUSED: "The remote WebDriver endpoint refused the connection.",
}


@dataclass
class ErrorResponse:
    """Structured error with an optional recovery hint."""

    error_code: str
    message: str
    status: int = HTTPStatus.INTERNAL_SERVER_ERROR
    suggestion: Optional[str] = None

    def to_text(self) -> str:
        """Plain-text form used as an HTTP response body."""
        text = f"{self.error_code}: {self.message}"
        if self.suggestion:
            text += f"\n{self.suggestion}"
        return text + "\n"


def map_error(exc: Exception) -> tuple[ErrorCode, str]:
    """
    Map an exception to an error code and message.

    Args:
        exc: The exception to map

    Returns:
        Tuple of (ErrorCode, error message)
    """
    exc_type = type(exc)

    # Check exact type first
    if exc_type in EXCEPTION_MAP:
        return EXCEPTION_MAP[exc_type], str(exc)

    # Check parent types
    for exc_class, code in EXCEPTION_MAP.items():
        if isinstance(exc, exc_class):
            return code, str(exc)

    if isinstance(exc, WebDriverException):
        if "connection refused" in str(exc).lower():
            return ErrorCode.CONNECTION_REFUSED, str(exc)

    return ErrorCode.INTERNAL_ERROR, str(exc) or exc_type.__name__


def create_error_response(code: ErrorCode, message: str) -> ErrorResponse:
    """
    Create a structured error response with suggestion and HTTP status.

    Args:
        code: Error code
        message: Error message

    Returns:
        ErrorResponse with suggestion from SUGGESTIONS
    """
    return ErrorResponse(
        error_code=code.value,
        message=message,
        status=int(STATUS_MAP.get(code, HTTPStatus.INTERNAL_SERVER_ERROR)),
        suggestion=SUGGESTIONS.get(code),
    )
