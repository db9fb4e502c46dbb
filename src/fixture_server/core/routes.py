"""Request/response records and route handlers for the fixture server."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Union

from .exceptions import ConfigError, HandlerError

HTML_CONTENT_TYPE = "text/html"

LINK_TESTING_PATH = "/link_testing"
LINK_TESTING_HTML = (
    '<html><body><a id="newTabLink" target="_blank" href="www.google.com">'
    "Click me</a></body></html>"
)


@dataclass(frozen=True)
class FixtureRequest:
    """An incoming request as seen by a route handler."""

    method: str
    path: str
    query: str = ""
    headers: dict = field(default_factory=dict)
    body: bytes = b""


@dataclass(frozen=True)
class FixtureResponse:
    """A complete response produced by a route handler."""

    status: int = 200
    body: Union[bytes, str] = b""
    content_type: str = HTML_CONTENT_TYPE
    headers: dict = field(default_factory=dict)

    @property
    def body_bytes(self) -> bytes:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @classmethod
    def coerce(cls, path: str, value: object) -> "FixtureResponse":
        """
        Normalize a handler's return value.

        Bare ``str`` or ``bytes`` are shorthand for a 200 HTML document.

        Raises:
            HandlerError: If the value cannot be turned into a response
        """
        if isinstance(value, FixtureResponse):
            if not isinstance(value.body, (str, bytes)):
                raise HandlerError(path, f"unsupported body type {type(value.body).__name__}")
            # 1xx is interim and cannot be the final response
            if isinstance(value.status, bool) or not isinstance(value.status, int) or not 200 <= value.status <= 599:
                raise HandlerError(path, f"status must be an integer in 200..599, got {value.status!r}")
            if not isinstance(value.content_type, str):
                raise HandlerError(path, f"unsupported content type {value.content_type!r}")
            if not isinstance(value.headers, Mapping):
                raise HandlerError(path, f"headers must be a mapping, got {type(value.headers).__name__}")
            return value
        if isinstance(value, (str, bytes)):
            return cls(body=value)
        raise HandlerError(path, f"unsupported response type {type(value).__name__}")


Handler = Callable[[FixtureRequest], Union[FixtureResponse, str, bytes]]


def static_html(
    body: str,
    status: int = 200,
    content_type: str = HTML_CONTENT_TYPE,
) -> Handler:
    """Build a handler that ignores the request and always returns ``body``."""
    response = FixtureResponse(status=status, body=body, content_type=content_type)

    def handler(request: FixtureRequest) -> FixtureResponse:
        return response

    return handler


def link_testing_page(request: FixtureRequest) -> FixtureResponse:
    """Page with a single anchor that opens www.google.com in a new browsing context."""
    return FixtureResponse(status=200, body=LINK_TESTING_HTML, content_type=HTML_CONTENT_TYPE)


def link_testing_routes() -> dict[str, Handler]:
    return {LINK_TESTING_PATH: link_testing_page}


def build_route_table(routes: Mapping[str, Handler]) -> Mapping[str, Handler]:
    """
    Validate a path -> handler mapping and freeze a copy of it.

    Args:
        routes: Mapping from exact URL path to handler

    Returns:
        Read-only copy of the route table

    Raises:
        ConfigError: If routes is empty, a path is malformed, or a handler
            is not callable
    """
    if not routes:
        raise ConfigError("at least one route is required")

    table: dict[str, Handler] = {}
    for path, handler in routes.items():
        if not isinstance(path, str) or not path.startswith("/"):
            raise ConfigError(f"route path must start with '/': {path!r}")
        if "?" in path or "#" in path:
            raise ConfigError(f"route path must not contain a query or fragment: {path!r}")
        if not callable(handler):
            raise ConfigError(f"handler for {path} is not callable")
        table[path] = handler

    return MappingProxyType(table)
