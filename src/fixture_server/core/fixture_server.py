"""Ephemeral route-table HTTP server that feeds deterministic pages to browser tests."""

from __future__ import annotations

import logging
import socket
import socketserver
import threading
import time
from contextlib import contextmanager
from enum import Enum
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Iterator, Mapping, Optional
from urllib.parse import urlsplit

from ..config import settings
from ..utils.error_mapper import ErrorCode, create_error_response, map_error
from .exceptions import BindError, ConfigError, FixtureServerError, HandlerError
from .routes import FixtureRequest, FixtureResponse, Handler, build_route_table

logger = logging.getLogger(__name__)

# Headers the server always computes itself
_RESERVED_HEADERS = {"content-length", "content-type"}


class ServerState(str, Enum):
    """Lifecycle state of a FixtureServer."""

    STOPPED = "stopped"
    LISTENING = "listening"


class _FixtureHTTPServer(ThreadingHTTPServer):
    """
    Thread-per-connection HTTP server holding a frozen route table.

    Open connections are tracked so that shutdown does not have to wait
    for idle keep-alive clients.
    """

    allow_reuse_address = True
    daemon_threads = True
    block_on_close = False

    def __init__(self, address, handler_class, routes: Mapping[str, Handler], connection_timeout: float):
        self.routes = routes
        self.connection_timeout = connection_timeout
        self._connections: set[socket.socket] = set()
        self._connections_lock = threading.Lock()
        super().__init__(address, handler_class)

    def server_bind(self) -> None:
        # HTTPServer.server_bind does a reverse DNS lookup for server_name.
        socketserver.TCPServer.server_bind(self)
        host, port = self.server_address[:2]
        self.server_name = host
        self.server_port = port

    def process_request(self, request, client_address) -> None:
        with self._connections_lock:
            self._connections.add(request)
        super().process_request(request, client_address)

    def shutdown_request(self, request) -> None:
        with self._connections_lock:
            self._connections.discard(request)
        super().shutdown_request(request)

    def close_connections(self) -> int:
        """Shut down every open client connection. Returns how many were open."""
        with self._connections_lock:
            connections = list(self._connections)
        for conn in connections:
            try:
                conn.shutdown(socket.SHUT_RDWR)
            except OSError as e:
                logger.debug(f"Connection already closed during shutdown: {e}")
        return len(connections)

    def handle_error(self, request, client_address) -> None:
        # Client disconnects and socket errors outside the dispatch boundary.
        logger.debug(f"Connection error from {client_address}", exc_info=True)


class _RouteRequestHandler(BaseHTTPRequestHandler):
    """Dispatches every request by exact path match against the route table."""

    protocol_version = "HTTP/1.1"
    server_version = "FixtureServer/0.1"
    server: _FixtureHTTPServer

    def setup(self) -> None:
        self.timeout = self.server.connection_timeout
        super().setup()

    def _dispatch(self) -> None:
        split = urlsplit(self.path)
        path = split.path

        try:
            body = self._read_body()
        except ValueError:
            # The body cannot be framed, so the connection cannot be reused.
            self.close_connection = True
            content_length = self.headers.get("Content-Length")
            self._send(
                self._error_response(
                    ErrorCode.BAD_REQUEST,
                    f"Invalid Content-Length: {content_length!r}",
                    headers={"Connection": "close"},
                )
            )
            return

        request = FixtureRequest(
            method=self.command,
            path=path,
            query=split.query,
            headers=dict(self.headers.items()),
            body=body,
        )

        handler = self.server.routes.get(path)
        if handler is None:
            response = self._error_response(ErrorCode.NOT_FOUND, f"No route for {path}")
        else:
            try:
                response = FixtureResponse.coerce(path, handler(request))
            except Exception as e:
                logger.exception(f"Handler for {self.command} {path} failed")
                error = e if isinstance(e, HandlerError) else HandlerError(path, f"{type(e).__name__}: {e}")
                response = self._error_response(*map_error(error))

        self._send(response)

    do_GET = _dispatch
    do_HEAD = _dispatch
    do_POST = _dispatch
    do_PUT = _dispatch
    do_PATCH = _dispatch
    do_DELETE = _dispatch
    do_OPTIONS = _dispatch

    def _read_body(self) -> bytes:
        if "chunked" in self.headers.get("Transfer-Encoding", "").lower():
            # Chunked bodies are not decoded; drop the connection after responding.
            self.close_connection = True
            return b""
        length = int(self.headers.get("Content-Length") or 0)
        if length < 0:
            raise ValueError(f"negative Content-Length: {length}")
        return self.rfile.read(length) if length > 0 else b""

    def _error_response(self, code: ErrorCode, message: str, headers: Optional[dict] = None) -> FixtureResponse:
        error = create_error_response(code, message)
        return FixtureResponse(
            status=error.status,
            body=error.to_text(),
            content_type="text/plain; charset=utf-8",
            headers=headers or {},
        )

    def _send(self, response: FixtureResponse) -> None:
        body = response.body_bytes
        allows_body = response.status >= 200 and response.status not in (204, 304)

        self.send_response(response.status)
        self.send_header("Content-Type", response.content_type)
        if allows_body:
            self.send_header("Content-Length", str(len(body)))
        for name, value in response.headers.items():
            if name.lower() not in _RESERVED_HEADERS:
                self.send_header(name, str(value))
        self.end_headers()

        if allows_body and self.command != "HEAD":
            self.wfile.write(body)

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        logger.debug(f"{self.address_string()} - {format % args}")


class FixtureServer:
    """
    Disposable HTTP server answering a fixed route table.

    Each path maps to a handler that turns a FixtureRequest into a
    FixtureResponse. Unknown paths get 404 and failing handlers get 500,
    without affecting other requests.

    Addressing:
    - host: interface the socket binds to
    - external_host: hostname placed into URLs from get_url/base_url, for
      browsers running outside the bind interface (simulators, devices)

    Usage:
        with FixtureServer(link_testing_routes(), port=8080) as server:
            driver.get(server.get_url("/link_testing"))
    """

    def __init__(
        self,
        routes: Mapping[str, Handler],
        port: Optional[int] = None,
        host: Optional[str] = None,
        external_host: Optional[str] = None,
        poll_interval: Optional[float] = None,
        connection_timeout: Optional[float] = None,
        shutdown_timeout: Optional[float] = None,
    ):
        self._routes = build_route_table(routes)

        port = 0 if port is None else port
        if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
            raise ConfigError(f"port must be an integer in 0..65535, got {port!r}")

        self.host = host or settings.host
        self.external_host = external_host or settings.external_host
        self.port = port
        self._requested_port = port
        self._poll_interval = poll_interval if poll_interval is not None else settings.poll_interval_seconds
        self._connection_timeout = (
            connection_timeout if connection_timeout is not None else settings.connection_timeout_seconds
        )
        self._shutdown_timeout = (
            shutdown_timeout if shutdown_timeout is not None else settings.shutdown_timeout_seconds
        )

        self._httpd: Optional[_FixtureHTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def routes(self) -> Mapping[str, Handler]:
        return self._routes

    @property
    def state(self) -> ServerState:
        return ServerState.LISTENING if self._httpd is not None else ServerState.STOPPED

    @property
    def is_listening(self) -> bool:
        return self.state is ServerState.LISTENING

    @property
    def base_url(self) -> str:
        return f"http://{self.external_host}:{self.port}"

    def get_url(self, path: str = "") -> str:
        path = path.lstrip("/")
        return f"{self.base_url}/{path}"

    def start(self) -> "FixtureServer":
        """
        Bind the listening socket and start serving in a background thread.

        Returns:
            self, for chaining

        Raises:
            BindError: If the port is unavailable (no retry)
            FixtureServerError: If the server is already listening
        """
        if self._httpd is not None:
            raise FixtureServerError(f"Fixture server already listening on {self.host}:{self.port}")

        try:
            httpd = _FixtureHTTPServer(
                (self.host, self._requested_port),
                _RouteRequestHandler,
                routes=self._routes,
                connection_timeout=self._connection_timeout,
            )
        except OSError as e:
            logger.error(f"Failed to bind fixture server to {self.host}:{self._requested_port}: {e}")
            raise BindError(self.host, self._requested_port, e.strerror or str(e)) from e

        thread = threading.Thread(
            target=httpd.serve_forever,
            kwargs={"poll_interval": self._poll_interval},
            name=f"fixture-server-{httpd.server_port}",
            daemon=True,
        )
        try:
            thread.start()
        except RuntimeError:
            httpd.server_close()
            raise

        self._httpd = httpd
        self._thread = thread
        self.port = httpd.server_port

        logger.info(
            f"Fixture server listening on {self.host}:{self.port} "
            f"(routes: {', '.join(sorted(self._routes))})"
        )
        return self

    def stop(self) -> None:
        """Stop serving and release the port. Safe to call any number of times."""
        httpd, thread = self._httpd, self._thread
        self._httpd = None
        self._thread = None
        if httpd is None:
            return

        try:
            httpd.shutdown()
        finally:
            httpd.server_close()
            open_connections = httpd.close_connections()

        if thread is not None:
            thread.join(timeout=self._shutdown_timeout)
            if thread.is_alive():
                logger.warning(f"Fixture server thread on port {self.port} did not exit in time")

        logger.info(f"Fixture server on port {self.port} stopped ({open_connections} connections closed)")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the server stops.

        Joins in short slices so KeyboardInterrupt is delivered promptly.

        Returns:
            True if the server is stopped, False if the timeout elapsed first
        """
        thread = self._thread
        if thread is None:
            return True

        deadline = None if timeout is None else time.monotonic() + timeout
        while thread.is_alive():
            remaining = 0.5 if deadline is None else min(0.5, deadline - time.monotonic())
            if remaining <= 0:
                return False
            thread.join(remaining)
        return True

    def __enter__(self) -> "FixtureServer":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
        return None

    def __repr__(self) -> str:
        return f"FixtureServer(host={self.host!r}, port={self.port}, state={self.state.value})"


@contextmanager
def serve(routes: Mapping[str, Handler], port: Optional[int] = None, **kwargs) -> Iterator[FixtureServer]:
    """Start a fixture server for the duration of the block; it is always stopped."""
    server = FixtureServer(routes, port=port, **kwargs)
    try:
        yield server.start()
    finally:
        server.stop()


def start_fixture_server(port: Optional[int], routes: Mapping[str, Handler], **kwargs) -> FixtureServer:
    """Create and start a fixture server. The caller must stop it."""
    return FixtureServer(routes, port=port, **kwargs).start()
