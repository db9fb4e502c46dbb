"""Standalone fixture server process serving the link-testing page."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from .config import settings
from .core.fixture_server import FixtureServer
from .core.routes import Handler, link_testing_routes

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_server(routes: Optional[Mapping[str, Handler]] = None) -> FixtureServer:
    """Create (but do not start) a fixture server from the global settings."""
    return FixtureServer(
        routes if routes is not None else link_testing_routes(),
        port=settings.port,
        host=settings.host,
        external_host=settings.external_host,
    )


def run_server(routes: Optional[Mapping[str, Handler]] = None) -> None:
    """Serve until interrupted. The port is released on every exit path."""
    server = create_server(routes)
    with server:
        for path in sorted(server.routes):
            logger.info(f"Serving {server.get_url(path)}")
        server.wait()
