"""Core fixture serving: routes, server lifecycle and errors."""

from .exceptions import (
    FixtureServerError,
    ConfigError,
    BindError,
    HandlerError,
    RemoteConnectionError,
    WaitTimeoutError,
)
from .routes import (
    FixtureRequest,
    FixtureResponse,
    static_html,
    link_testing_page,
    link_testing_routes,
)
from .fixture_server import FixtureServer, ServerState, serve, start_fixture_server

__all__ = [
    "FixtureServerError",
    "ConfigError",
    "BindError",
    "HandlerError",
    "RemoteConnectionError",
    "WaitTimeoutError",
    "FixtureRequest",
    "FixtureResponse",
    "static_html",
    "link_testing_page",
    "link_testing_routes",
    "FixtureServer",
    "ServerState",
    "serve",
    "start_fixture_server",
]
