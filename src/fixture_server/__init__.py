"""Disposable local HTTP fixture server for browser automation tests."""

from .core import (
    FixtureServer,
    FixtureRequest,
    FixtureResponse,
    ServerState,
    serve,
    start_fixture_server,
    static_html,
    link_testing_page,
    link_testing_routes,
    FixtureServerError,
    ConfigError,
    BindError,
    HandlerError,
)

__version__ = "0.1.0"

__all__ = [
    "FixtureServer",
    "FixtureRequest",
    "FixtureResponse",
    "ServerState",
    "serve",
    "start_fixture_server",
    "static_html",
    "link_testing_page",
    "link_testing_routes",
    "FixtureServerError",
    "ConfigError",
    "BindError",
    "HandlerError",
]
